"""GitHub review service.

Turns a resolved review into pull request review API calls and posts them
through the gh CLI runner.
"""

from __future__ import annotations

import json
from dataclasses import dataclass

from prr.domain.comments import FileComment, LineComment, ResolvedReview, SpanComment
from prr.domain.review_metadata import PullRequestRef
from prr.infrastructure.github.runner import GhCommandRunner


class ReviewSubmissionError(Exception):
    """Raised when a review cannot be submitted."""

    pass


@dataclass
class GitHubReviewService:
    """Service for submitting reviews to GitHub.

    Uses GhCommandRunner for actual API calls (dependency injection).

    Attributes:
        gh: Runner used for API calls
        use_position: Address comments by diff position rather than line/side
    """

    gh: GhCommandRunner
    use_position: bool = False

    # ============================================================
    # Public API - Submission
    # ============================================================

    def submit(self, ref: PullRequestRef, review: ResolvedReview, commit_id: str | None) -> None:
        """Submit a review and its file-level comments.

        Args:
            ref: Pull request to review
            review: Review with resolved anchors
            commit_id: Commit the review applies to

        Raises:
            ReviewSubmissionError: If the review is empty or a request fails
        """
        if review.is_empty:
            raise ReviewSubmissionError("No review comments")

        # The review request is sent last; callers mark it submitted once it succeeds
        for file_comment in review.file_comments:
            endpoint = f"repos/{ref.owner}/{ref.repo}/pulls/{ref.number}/comments"
            success, output = self.gh.api_post_json(
                endpoint, self.build_file_comment_payload(file_comment, commit_id)
            )
            if not success:
                raise ReviewSubmissionError(
                    f"Error posting file comment on {file_comment.file}: {output.strip()}"
                )
            print(f"Posted file comment on {file_comment.file}")

        if review.body or review.directive is not None or review.comments:
            endpoint = f"repos/{ref.owner}/{ref.repo}/pulls/{ref.number}/reviews"
            success, output = self.gh.api_post_json(
                endpoint, self.build_review_payload(review, commit_id)
            )
            if not success:
                raise ReviewSubmissionError(f"Error submitting review: {output.strip()}")
            print(f"Submitted {review.event} review with {len(review.comments)} comment(s)")

    def get_head_sha(self, ref: PullRequestRef) -> str | None:
        """Get the HEAD commit SHA for a PR, or None if it cannot be fetched."""
        success, output = self.gh.get_head_sha(ref)
        return output if success and output else None

    # ============================================================
    # Public API - Payloads
    # ============================================================

    def build_review_payload(self, review: ResolvedReview, commit_id: str | None) -> dict:
        """Build the JSON body for the create-review endpoint."""
        payload: dict = {
            "body": review.body,
            "event": review.event,
            "comments": [self._comment_payload(comment) for comment in review.comments],
        }
        if commit_id:
            payload["commit_id"] = commit_id
        return payload

    @staticmethod
    def build_file_comment_payload(file_comment: FileComment, commit_id: str | None) -> dict:
        """Build the JSON body for a file-level review comment."""
        payload = {
            "body": file_comment.body,
            "path": file_comment.file,
            "subject_type": "file",
        }
        if commit_id:
            payload["commit_id"] = commit_id
        return payload

    def format_debug(self, review: ResolvedReview, commit_id: str | None) -> str:
        """Pretty-print everything submit() would send."""
        requests = {
            "review": self.build_review_payload(review, commit_id),
            "file_comments": [
                self.build_file_comment_payload(fc, commit_id) for fc in review.file_comments
            ],
        }
        return json.dumps(requests, indent=2)

    # ============================================================
    # Private Helpers
    # ============================================================

    def _comment_payload(self, comment: LineComment) -> dict:
        anchor = comment.anchor
        payload: dict = {"path": anchor.file, "body": comment.body}

        if self.use_position:
            payload["position"] = anchor.position
            return payload

        payload["line"] = anchor.line
        payload["side"] = anchor.side.value
        if isinstance(comment, SpanComment):
            payload["start_line"] = comment.start_anchor.line
            payload["start_side"] = comment.start_anchor.side.value
        return payload

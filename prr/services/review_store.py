"""Review store service.

Keeps review files on disk, laid out as:

    <workdir>/<owner>/<repo>/<number>.prr    annotated review file
    <workdir>/<owner>/<repo>/.<number>       JSON metadata

The review file is the diff with every line quoted, so the reviewer can
write comments between the quoted lines.
"""

from __future__ import annotations

import time
from pathlib import Path

from prr.domain.diff import DiffModel
from prr.domain.markup import quote_diff
from prr.domain.review_metadata import PullRequestRef, ReviewMetadata, ReviewStatus
from prr.services.review_parser import ReviewParser

REVIEW_FILE_SUFFIX = ".prr"


class ReviewStoreError(Exception):
    """Raised when a review cannot be created, read, or removed."""

    pass


class ReviewStore:
    """Core service for review files and their metadata."""

    def __init__(self, workdir: Path, parser: ReviewParser | None = None):
        """Initialize with the directory holding all reviews.

        Args:
            workdir: Root directory for review files
            parser: Parser used to detect whether a review has comments
        """
        self.workdir = Path(workdir)
        self.parser = parser or ReviewParser()

    # --------------------------------------------------------
    # Paths
    # --------------------------------------------------------

    def review_path(self, ref: PullRequestRef) -> Path:
        """Path to the user-facing review file."""
        return self.workdir / ref.owner / ref.repo / f"{ref.number}{REVIEW_FILE_SUFFIX}"

    def metadata_path(self, ref: PullRequestRef) -> Path:
        """Path to the metadata dotfile next to the review file."""
        return self.review_path(ref).with_name(f".{ref.number}")

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    def create(
        self,
        ref: PullRequestRef,
        diff: str,
        commit_id: str | None,
        force: bool = False,
    ) -> Path:
        """Write a fresh review file for a pull request diff.

        Args:
            ref: Pull request being reviewed
            diff: Raw unified diff
            commit_id: Head commit the diff was taken from
            force: Overwrite even if the existing review has unsubmitted comments

        Returns:
            Path to the review file

        Raises:
            ReviewStoreError: If unsubmitted comments would be overwritten
            MalformedDiffError: If the diff cannot be parsed
        """
        if not force and self.has_unsubmitted_changes(ref):
            raise ReviewStoreError(
                "You have unsubmitted changes to the requested review. "
                "Either submit the existing changes, delete the existing review file, "
                "or re-run this command with --force."
            )

        document = quote_diff(DiffModel.from_diff_content(diff).render())

        review_path = self.review_path(ref)
        review_path.parent.mkdir(parents=True, exist_ok=True)
        with open(review_path, "w", newline="") as f:
            f.write(document)

        metadata = ReviewMetadata(original=diff, submitted=None, commit_id=commit_id)
        self.metadata_path(ref).write_text(metadata.to_json())
        return review_path

    def exists(self, ref: PullRequestRef) -> bool:
        return self.review_path(ref).is_file()

    def read_review(self, ref: PullRequestRef) -> str:
        """Read the annotated review file."""
        try:
            with open(self.review_path(ref), newline="") as f:
                return f.read()
        except FileNotFoundError:
            raise ReviewStoreError(f"No review found for {ref.handle}")

    def read_metadata(self, ref: PullRequestRef) -> ReviewMetadata:
        """Load the metadata dotfile for a review."""
        try:
            return ReviewMetadata.from_json(self.metadata_path(ref).read_text())
        except FileNotFoundError:
            raise ReviewStoreError(f"No review metadata found for {ref.handle}")
        except ValueError as e:
            raise ReviewStoreError(f"Failed to parse metadata for {ref.handle}: {e}")

    def mark_submitted(self, ref: PullRequestRef, submitted_at: int | None = None) -> None:
        """Record the submission time in the metadata dotfile."""
        metadata = self.read_metadata(ref)
        metadata.submitted = submitted_at if submitted_at is not None else int(time.time())
        self.metadata_path(ref).write_text(metadata.to_json())

    def status(self, ref: PullRequestRef) -> ReviewStatus:
        """Get the lifecycle status of a review."""
        metadata = self.read_metadata(ref)
        if metadata.submitted is not None:
            return ReviewStatus.SUBMITTED
        if self.has_comments(ref):
            return ReviewStatus.REVIEWED
        return ReviewStatus.NEW

    def has_comments(self, ref: PullRequestRef) -> bool:
        """Whether the reviewer has written anything in the review file."""
        return self.parser.assemble(self.read_review(ref)).has_comments

    def has_unsubmitted_changes(self, ref: PullRequestRef) -> bool:
        """Whether the review holds comments that were never submitted.

        Submitted reviews are ignored: edits after submission are discarded.
        """
        if not self.exists(ref):
            return False
        if self.read_metadata(ref).submitted is not None:
            return False
        return self.has_comments(ref)

    def remove(self, ref: PullRequestRef, force: bool = False) -> None:
        """Delete a review file and its metadata.

        Raises:
            ReviewStoreError: If the review has unsubmitted comments and force is False
        """
        if not force and self.has_unsubmitted_changes(ref):
            raise ReviewStoreError(
                f"You have unsubmitted changes to {ref.handle}. "
                "Re-run this command with --force to ignore this check."
            )
        self.review_path(ref).unlink(missing_ok=True)
        self.metadata_path(ref).unlink(missing_ok=True)

    def list_reviews(self) -> list[PullRequestRef]:
        """Find every review file under the workdir."""
        if not self.workdir.is_dir():
            return []

        refs: list[PullRequestRef] = []
        for review_file in sorted(self.workdir.glob(f"*/*/*{REVIEW_FILE_SUFFIX}")):
            number = review_file.name[: -len(REVIEW_FILE_SUFFIX)]
            if not number.isdigit():
                raise ReviewStoreError(f"Malformed review file path: {review_file}")
            refs.append(
                PullRequestRef(review_file.parent.parent.name, review_file.parent.name, int(number))
            )
        return refs

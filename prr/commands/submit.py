"""Submit command - parse a review file and post it to GitHub.

Thin command that:
1. Loads the review file and its metadata
2. Re-fetches the current diff so coordinates come from GitHub, not the file
3. Parses and aligns the review against that diff
4. Posts the review (or prints it with --debug)
"""

from __future__ import annotations

import sys

from prr.domain.errors import ParseError
from prr.domain.review_metadata import PullRequestRef
from prr.infrastructure.config import Config
from prr.infrastructure.github.runner import GhCommandRunner
from prr.services.github_review import GitHubReviewService, ReviewSubmissionError
from prr.services.review_parser import ReviewParser
from prr.services.review_store import ReviewStore, ReviewStoreError


def cmd_submit(
    pr: str,
    config: Config,
    debug: bool = False,
    gh: GhCommandRunner | None = None,
) -> int:
    """Submit the review for a PR.

    Args:
        pr: Pull request reference (e.g. "owner/repo/24")
        config: Loaded user configuration
        debug: Print the request bodies instead of posting them
        gh: GitHub runner (default: one built from config)

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        ref = PullRequestRef.from_string(pr, config.repository)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 1

    # --------------------------------------------------------
    # 1. Load review file
    # --------------------------------------------------------
    store = ReviewStore(config.workdir)
    try:
        document = store.read_review(ref)
        metadata = store.read_metadata(ref)
    except ReviewStoreError as e:
        print(str(e), file=sys.stderr)
        return 1

    if metadata.submitted is not None:
        print(
            f"Review for {ref.handle} was already submitted. "
            "Run `prr get --force` to start a new one.",
            file=sys.stderr,
        )
        return 1

    # --------------------------------------------------------
    # 2. Re-fetch the canonical diff
    # --------------------------------------------------------
    gh = gh or GhCommandRunner(host=config.host)
    service = GitHubReviewService(gh=gh, use_position=config.use_position)

    success, diff = gh.pr_diff(ref)
    if not success:
        print(f"Failed to fetch diff for {ref.handle}: {diff.strip()}", file=sys.stderr)
        return 1

    commit_id = service.get_head_sha(ref) or metadata.commit_id
    if metadata.commit_id and commit_id != metadata.commit_id:
        print(f"Note: {ref.handle} has new commits since the review was fetched")

    # --------------------------------------------------------
    # 3. Parse and align
    # --------------------------------------------------------
    try:
        review = ReviewParser().parse(document, diff)
    except ParseError as e:
        print(f"Failed to parse {store.review_path(ref)}: {e}", file=sys.stderr)
        if _is_stale(document, metadata.original, diff):
            print(
                f"The review still matches the diff fetched by `prr get`, so {ref.handle} "
                "has changed since. Run `prr get --force` and copy your comments over.",
                file=sys.stderr,
            )
        return 1

    # --------------------------------------------------------
    # 4. Submit
    # --------------------------------------------------------
    if debug:
        print(service.format_debug(review, commit_id))
        return 0

    try:
        service.submit(ref, review, commit_id)
    except ReviewSubmissionError as e:
        print(str(e), file=sys.stderr)
        return 1

    store.mark_submitted(ref)
    return 0


def _is_stale(document: str, original: str, diff: str) -> bool:
    """Whether the review parses against the diff it was rendered from but not the current one."""
    if not original or original == diff:
        return False
    try:
        ReviewParser().parse(document, original)
    except ParseError:
        return False
    return True

"""Remove command - delete review files."""

from __future__ import annotations

import sys

from prr.domain.errors import ParseError
from prr.domain.review_metadata import PullRequestRef
from prr.infrastructure.config import Config
from prr.services.review_store import ReviewStore, ReviewStoreError


def cmd_remove(
    prs: list[str],
    config: Config,
    force: bool = False,
    submitted: bool = False,
) -> int:
    """Remove reviews.

    Args:
        prs: Pull request references to remove
        config: Loaded user configuration
        force: Remove even if a review has unsubmitted comments
        submitted: Also remove every submitted review

    Returns:
        Exit code (0 if everything was removed, 1 otherwise)
    """
    store = ReviewStore(config.workdir)

    refs: list[PullRequestRef] = []
    for pr in prs:
        try:
            refs.append(PullRequestRef.from_string(pr, config.repository))
        except ValueError as e:
            print(str(e), file=sys.stderr)
            return 1

    if submitted:
        try:
            for ref in store.list_reviews():
                if ref not in refs and store.read_metadata(ref).submitted is not None:
                    refs.append(ref)
        except ReviewStoreError as e:
            print(str(e), file=sys.stderr)
            return 1

    if not refs:
        print("Nothing to remove", file=sys.stderr)
        return 1

    exit_code = 0
    for ref in refs:
        try:
            store.remove(ref, force=force)
            print(f"Removed {ref.handle}")
        except (ReviewStoreError, ParseError) as e:
            print(f"{ref.handle}: {e}", file=sys.stderr)
            exit_code = 1

    return exit_code

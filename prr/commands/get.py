"""Get command - fetch a pull request and start a review.

Thin command that wires the gh runner and the review store together.
"""

from __future__ import annotations

import sys

from prr.domain.errors import ParseError
from prr.domain.review_metadata import PullRequestRef
from prr.infrastructure.config import Config
from prr.infrastructure.github.runner import GhCommandRunner
from prr.services.review_store import ReviewStore, ReviewStoreError


def cmd_get(
    pr: str,
    config: Config,
    force: bool = False,
    open_editor: bool = False,
    gh: GhCommandRunner | None = None,
) -> int:
    """Download a PR diff into a new review file.

    Args:
        pr: Pull request reference (e.g. "owner/repo/24")
        config: Loaded user configuration
        force: Overwrite a review that has unsubmitted comments
        open_editor: Open the review file in the editor afterwards
        gh: GitHub runner (default: one built from config)

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    from prr.commands.edit import open_in_editor

    try:
        ref = PullRequestRef.from_string(pr, config.repository)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 1

    gh = gh or GhCommandRunner(host=config.host)

    # --------------------------------------------------------
    # 1. Fetch diff and head commit
    # --------------------------------------------------------
    success, diff = gh.pr_diff(ref)
    if not success:
        print(f"Failed to fetch diff for {ref.handle}: {diff.strip()}", file=sys.stderr)
        return 1

    success, commit_id = gh.get_head_sha(ref)
    if not success:
        print(f"Failed to fetch head commit for {ref.handle}: {commit_id}", file=sys.stderr)
        return 1

    # --------------------------------------------------------
    # 2. Write review file
    # --------------------------------------------------------
    store = ReviewStore(config.workdir)
    try:
        path = store.create(ref, diff, commit_id or None, force=force)
    except (ReviewStoreError, ParseError) as e:
        print(str(e), file=sys.stderr)
        return 1

    print(path)

    if open_editor:
        return open_in_editor(path, config.resolve_editor())
    return 0

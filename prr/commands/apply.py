"""Apply command - apply a PR's diff to the local working directory.

Useful for building and testing a pull request before reviewing it.
"""

from __future__ import annotations

import sys

from prr.domain.review_metadata import PullRequestRef
from prr.infrastructure.config import Config
from prr.infrastructure.github.runner import GhCommandRunner
from prr.services.git_operations import (
    GitApplyError,
    GitOperationsService,
    GitRepositoryError,
)


def cmd_apply(
    pr: str,
    config: Config,
    repo_path: str = ".",
    gh: GhCommandRunner | None = None,
) -> int:
    """Apply a pull request's diff to a local checkout.

    Args:
        pr: Pull request reference (e.g. "owner/repo/24")
        config: Loaded user configuration
        repo_path: Repository to apply the diff in
        gh: GitHub runner (default: one built from config)

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        ref = PullRequestRef.from_string(pr, config.repository)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 1

    gh = gh or GhCommandRunner(host=config.host)
    success, diff = gh.pr_diff(ref)
    if not success:
        print(f"Failed to fetch diff for {ref.handle}: {diff.strip()}", file=sys.stderr)
        return 1

    try:
        GitOperationsService(repo_path).apply_patch(diff)
    except (GitApplyError, GitRepositoryError) as e:
        print(str(e), file=sys.stderr)
        return 1

    print(f"Applied {ref.handle}")
    return 0

"""Edit command - open a review file in the user's editor.

Fetches the pull request first when no review exists yet.
"""

from __future__ import annotations

import shlex
import subprocess
import sys
from pathlib import Path

from prr.domain.review_metadata import PullRequestRef
from prr.infrastructure.config import Config
from prr.infrastructure.github.runner import GhCommandRunner
from prr.services.review_store import ReviewStore


def cmd_edit(pr: str, config: Config, gh: GhCommandRunner | None = None) -> int:
    """Open the review file for a PR in the configured editor.

    Args:
        pr: Pull request reference (e.g. "owner/repo/24")
        config: Loaded user configuration
        gh: GitHub runner (default: one built from config)

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    from prr.commands.get import cmd_get

    try:
        ref = PullRequestRef.from_string(pr, config.repository)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 1

    store = ReviewStore(config.workdir)
    if not store.exists(ref):
        return cmd_get(pr, config, open_editor=True, gh=gh)

    return open_in_editor(store.review_path(ref), config.resolve_editor())


def open_in_editor(path: Path, editor: str | None) -> int:
    """Run the editor on a file and wait for it to exit."""
    if not editor:
        print("No editor configured: set \"editor\" in the config or $EDITOR", file=sys.stderr)
        return 1

    try:
        result = subprocess.run([*shlex.split(editor), str(path)])
    except FileNotFoundError:
        print(f"Editor not found: {editor}", file=sys.stderr)
        return 1

    if result.returncode != 0:
        print(f"Editor exited with status {result.returncode}", file=sys.stderr)
        return 1
    return 0

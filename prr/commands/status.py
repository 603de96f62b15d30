"""Status command - list every known review and its state."""

from __future__ import annotations

import sys

from prr.domain.errors import ParseError
from prr.infrastructure.config import Config
from prr.services.review_store import ReviewStore, ReviewStoreError


def cmd_status(config: Config, no_titles: bool = False) -> int:
    """Print a status line per review.

    Args:
        config: Loaded user configuration
        no_titles: Omit the column header line

    Returns:
        Exit code (0 for success, 1 if any review could not be read)
    """
    store = ReviewStore(config.workdir)
    try:
        refs = store.list_reviews()
    except ReviewStoreError as e:
        print(str(e), file=sys.stderr)
        return 1

    rows: list[tuple[str, str]] = []
    exit_code = 0
    for ref in refs:
        try:
            status = store.status(ref).value
        except (ReviewStoreError, ParseError) as e:
            status = f"ERROR ({e})"
            exit_code = 1
        rows.append((ref.handle, status))

    width = max([len("Handle")] + [len(handle) for handle, _ in rows])
    if not no_titles:
        print(f"{'Handle':<{width}}  Status")
    for handle, status in rows:
        print(f"{handle:<{width}}  {status}")

    return exit_code

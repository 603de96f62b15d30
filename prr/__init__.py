"""prr - review GitHub pull requests from your editor.

A review is a plain text file holding the pull request diff with every
line quoted. Comments are written between the quoted lines and submitted
as a GitHub review.

Usage:
    python -m prr <command> [options]
    prr <command> [options]

Structure:
    prr/
    ├── __main__.py          # Entry point dispatcher
    ├── domain/              # Domain models (parse-once pattern)
    │   ├── diff.py          # DiffModel, FileDiff, Hunk, DiffLine
    │   ├── markup.py        # Review file tokens
    │   ├── comments.py      # Comments, anchors, reviews
    │   ├── review_metadata.py
    │   └── errors.py        # ParseError hierarchy
    ├── services/            # Business logic services
    │   ├── comment_assembler.py
    │   ├── alignment.py
    │   ├── review_parser.py
    │   ├── review_store.py
    │   ├── github_review.py
    │   └── git_operations.py
    ├── infrastructure/      # External system interactions
    │   ├── config.py
    │   └── github/runner.py
    └── commands/            # Thin command orchestrators
"""

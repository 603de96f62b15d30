"""GitHub infrastructure via the gh CLI."""

from prr.infrastructure.github.runner import CommandRunner, GhCommandRunner

__all__ = ["CommandRunner", "GhCommandRunner"]

"""GitHub CLI command runner.

Infrastructure component that wraps subprocess calls to the gh CLI.
This abstraction allows services to be tested without actually calling gh.
"""

from __future__ import annotations

import json
import subprocess
import sys
from dataclasses import dataclass
from typing import Protocol

from prr.domain.review_metadata import PullRequestRef


class CommandRunner(Protocol):
    """Protocol for running shell commands."""

    def run(self, cmd: list[str], input_text: str | None = None) -> tuple[bool, str]:
        """Run a command and return (success, output/error)."""
        ...


@dataclass
class GhCommandRunner:
    """Runs gh CLI commands via subprocess.

    This is the production implementation of CommandRunner.
    For testing, mock this class or use a fake implementation.
    """

    dry_run: bool = False
    host: str | None = None

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    def run(self, cmd: list[str], input_text: str | None = None) -> tuple[bool, str]:
        """Run a gh CLI command.

        Args:
            cmd: Command and arguments (e.g., ["gh", "api", "..."])
            input_text: Text piped to the command's stdin

        Returns:
            Tuple of (success, output_or_error)
        """
        if self.dry_run:
            return True, f"[DRY RUN] Would run: {' '.join(cmd)}"

        try:
            result = subprocess.run(
                cmd, input=input_text, capture_output=True, text=True, check=True
            )
            return True, result.stdout
        except subprocess.CalledProcessError as e:
            print(f"Command failed: {e.stderr}", file=sys.stderr)
            return False, e.stderr
        except FileNotFoundError:
            print("Command failed: gh CLI not found on PATH", file=sys.stderr)
            return False, "gh CLI not found on PATH"

    def api_get(self, endpoint: str, jq_filter: str | None = None) -> tuple[bool, str]:
        """Make a GET request to the GitHub API.

        Args:
            endpoint: API endpoint (e.g., "repos/owner/repo/pulls/123")
            jq_filter: Optional jq filter for the response

        Returns:
            Tuple of (success, response_or_error)
        """
        cmd = self._api_command(endpoint)
        if jq_filter:
            cmd.extend(["--jq", jq_filter])
        return self.run(cmd)

    def api_post_json(self, endpoint: str, payload: dict) -> tuple[bool, str]:
        """POST a JSON body to the GitHub API.

        The body goes through stdin so nested arrays (review comments) survive
        intact, which -f/-F fields cannot express.

        Args:
            endpoint: API endpoint
            payload: JSON-serializable request body

        Returns:
            Tuple of (success, response_or_error)
        """
        cmd = self._api_command(endpoint) + ["--method", "POST", "--input", "-"]
        return self.run(cmd, input_text=json.dumps(payload))

    def pr_diff(self, ref: PullRequestRef) -> tuple[bool, str]:
        """Get the diff for a pull request.

        Args:
            ref: Pull request to fetch

        Returns:
            Tuple of (success, diff_content_or_error)
        """
        return self.run(["gh", "pr", "diff", str(ref.number), "-R", self._repo_arg(ref)])

    def get_head_sha(self, ref: PullRequestRef) -> tuple[bool, str]:
        """Get the head commit SHA of a pull request.

        Returns:
            Tuple of (success, sha_or_error)
        """
        success, output = self.api_get(
            f"repos/{ref.owner}/{ref.repo}/pulls/{ref.number}", ".head.sha"
        )
        return success, output.strip()

    # --------------------------------------------------------
    # Private Helpers
    # --------------------------------------------------------

    def _api_command(self, endpoint: str) -> list[str]:
        cmd = ["gh", "api"]
        if self.host:
            cmd.extend(["--hostname", self.host])
        cmd.append(endpoint)
        return cmd

    def _repo_arg(self, ref: PullRequestRef) -> str:
        if self.host:
            return f"{self.host}/{ref.repository}"
        return ref.repository

"""Tests for GhCommandRunner.

Tests cover:
- gh CLI command construction for diffs, API reads, and JSON posts
- GitHub Enterprise host handling
- Dry-run mode
- Error propagation from failed or missing commands
"""

import json
import subprocess
import unittest
from unittest.mock import MagicMock, patch

from prr.domain.review_metadata import PullRequestRef
from prr.infrastructure.github.runner import GhCommandRunner

REF = PullRequestRef("acme", "widgets", 42)


class TestCommands(unittest.TestCase):
    """Tests for gh command construction."""

    def setUp(self):
        self.runner = GhCommandRunner()

    def test_pr_diff(self):
        with patch.object(self.runner, "run", return_value=(True, "diff")) as mock_run:
            result = self.runner.pr_diff(REF)

        mock_run.assert_called_once_with(["gh", "pr", "diff", "42", "-R", "acme/widgets"])
        self.assertEqual(result, (True, "diff"))

    def test_pr_diff_on_enterprise_host(self):
        runner = GhCommandRunner(host="git.example.com")
        with patch.object(runner, "run", return_value=(True, "")) as mock_run:
            runner.pr_diff(REF)

        args = mock_run.call_args[0][0]
        self.assertEqual(args[args.index("-R") + 1], "git.example.com/acme/widgets")

    def test_api_get_with_jq(self):
        with patch.object(self.runner, "run", return_value=(True, "x")) as mock_run:
            self.runner.api_get("repos/acme/widgets", ".name")

        mock_run.assert_called_once_with(["gh", "api", "repos/acme/widgets", "--jq", ".name"])

    def test_api_post_json_sends_body_on_stdin(self):
        payload = {"body": "hi", "comments": [{"path": "a.py", "line": 3}]}
        with patch.object(self.runner, "run", return_value=(True, "{}")) as mock_run:
            self.runner.api_post_json("repos/acme/widgets/pulls/42/reviews", payload)

        args, kwargs = mock_run.call_args
        self.assertEqual(
            args[0],
            ["gh", "api", "repos/acme/widgets/pulls/42/reviews", "--method", "POST", "--input", "-"],
        )
        self.assertEqual(json.loads(kwargs["input_text"]), payload)

    def test_api_command_includes_hostname(self):
        runner = GhCommandRunner(host="git.example.com")
        with patch.object(runner, "run", return_value=(True, "")) as mock_run:
            runner.api_get("user")

        mock_run.assert_called_once_with(["gh", "api", "--hostname", "git.example.com", "user"])

    def test_get_head_sha_strips_output(self):
        with patch.object(self.runner, "run", return_value=(True, "abc123\n")) as mock_run:
            result = self.runner.get_head_sha(REF)

        self.assertEqual(result, (True, "abc123"))
        args = mock_run.call_args[0][0]
        self.assertIn("repos/acme/widgets/pulls/42", args)
        self.assertEqual(args[args.index("--jq") + 1], ".head.sha")


class TestRun(unittest.TestCase):
    """Tests for GhCommandRunner.run."""

    def test_returns_stdout(self):
        completed = MagicMock(stdout="ok")
        with patch("prr.infrastructure.github.runner.subprocess.run", return_value=completed) as mock_run:
            result = GhCommandRunner().run(["gh", "api", "user"], input_text="{}")

        self.assertEqual(result, (True, "ok"))
        self.assertEqual(mock_run.call_args[1]["input"], "{}")

    def test_returns_stderr_on_failure(self):
        error = subprocess.CalledProcessError(1, ["gh"], stderr="not logged in")
        with patch("prr.infrastructure.github.runner.subprocess.run", side_effect=error):
            result = GhCommandRunner().run(["gh", "api", "user"])

        self.assertEqual(result, (False, "not logged in"))

    def test_missing_gh(self):
        with patch("prr.infrastructure.github.runner.subprocess.run", side_effect=FileNotFoundError):
            success, output = GhCommandRunner().run(["gh", "api", "user"])

        self.assertFalse(success)
        self.assertIn("gh CLI not found", output)

    def test_dry_run_does_not_execute(self):
        with patch("prr.infrastructure.github.runner.subprocess.run") as mock_run:
            success, output = GhCommandRunner(dry_run=True).run(["gh", "api", "user"])

        mock_run.assert_not_called()
        self.assertTrue(success)
        self.assertIn("[DRY RUN]", output)


if __name__ == "__main__":
    unittest.main()

"""Git operations service.

Core service for git command operations. Used to apply a pull request's
diff to a local checkout for building and testing.
"""

import subprocess
from pathlib import Path


class GitApplyError(Exception):
    """Raised when git apply fails."""

    pass


class GitRepositoryError(Exception):
    """Raised when directory is not a git repository."""

    pass


class GitOperationsService:
    """Core service for git command operations.

    Encapsulates all subprocess calls to git commands.
    """

    def __init__(self, repo_path: str = "."):
        """Initialize with repository path.

        Args:
            repo_path: Path to git repository (default: current directory)
        """
        self.repo_path = Path(repo_path)

    def apply_patch(self, diff_content: str) -> None:
        """Apply a unified diff to the working directory.

        Args:
            diff_content: Raw diff text

        Raises:
            GitApplyError: If the patch does not apply cleanly
            GitRepositoryError: If not in a git repository
        """
        if not self.is_git_repository():
            raise GitRepositoryError(
                f"Not a git repository: {self.repo_path}\n"
                "Make sure you're running from within a git repository."
            )

        try:
            subprocess.run(
                ["git", "apply", "-"],
                cwd=self.repo_path,
                input=diff_content,
                capture_output=True,
                text=True,
                check=True,
            )
        except subprocess.CalledProcessError as e:
            raise GitApplyError(f"Failed to apply diff: {e.stderr}")

    def is_git_repository(self) -> bool:
        """Check if current directory is a git repository.

        Returns:
            True if valid git repo, False otherwise
        """
        try:
            subprocess.run(
                ["git", "rev-parse", "--git-dir"],
                cwd=self.repo_path,
                capture_output=True,
                check=True,
            )
            return True
        except (subprocess.CalledProcessError, FileNotFoundError):
            return False

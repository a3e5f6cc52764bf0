"""
Git command runner for the revision loader.

This module provides the synchronous primitive every loader component uses to
query the repository, plus the repository context (working directory and
current branch) shared by one loader instance. It never mutates the
repository.
"""

import logging
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional


class GitOperationResult:
    """Result of a Git operation."""

    def __init__(self, success: bool, output: str = "", error: str = "", data: Dict[str, Any] = None):
        self.success = success
        self.output = output
        self.error = error
        self.data = data or {}

    def __repr__(self) -> str:
        return f"GitOperationResult(success={self.success!r}, output={self.output[:40]!r}, error={self.error[:40]!r})"


class GitTool:
    """Repository context and read-only Git command runner."""

    def __init__(self, repo_path: Optional[Path] = None, git_binary: str = "git", timeout: int = 30):
        self.repo_path: str = str(repo_path) if repo_path else ""
        self.git_binary = git_binary
        self.timeout = timeout
        self.current_branch: str = ""
        self.logger = logging.getLogger(__name__)

    def get_working_dir(self) -> str:
        return self.repo_path

    def set_working_dir(self, path: str) -> None:
        self.repo_path = str(path)

    def run_git(self, command: List[str], cwd: Optional[str] = None) -> GitOperationResult:
        """Run a Git command and return the result.

        Output is returned untouched; callers strip it where the format
        allows. Spawn errors and timeouts are reported as failures.
        """
        cwd = cwd or self.repo_path or None
        self.logger.debug(f"Running git {' '.join(command)} in {cwd}")
        try:
            result = subprocess.run(
                [self.git_binary] + command,
                cwd=cwd,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                check=False,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            return GitOperationResult(
                success=False,
                error=f"git {command[0]} timed out after {e.timeout}s",
                data={"exception": str(e)},
            )
        except (OSError, ValueError) as e:
            return GitOperationResult(
                success=False,
                error=str(e),
                data={"exception": str(e)},
            )

        if result.returncode == 0:
            return GitOperationResult(
                success=True,
                output=result.stdout,
                data={"returncode": result.returncode},
            )
        return GitOperationResult(
            success=False,
            output=result.stdout,
            error=result.stderr.strip(),
            data={"returncode": result.returncode},
        )

    def is_git_repo(self) -> bool:
        """Check if the working directory is inside a Git repository."""
        return self.run_git(["rev-parse", "--git-dir"]).success

    def update_current_branch(self) -> str:
        """Refresh the cached current branch name.

        A detached HEAD leaves the branch empty.
        """
        result = self.run_git(["rev-parse", "--abbrev-ref", "HEAD"])
        branch = result.output.strip() if result.success else ""
        self.current_branch = "" if branch == "HEAD" else branch
        return self.current_branch

    def get_last_commit(self) -> GitOperationResult:
        """Resolve the commit HEAD points at."""
        result = self.run_git(["rev-parse", "HEAD"])
        if result.success:
            result.output = result.output.strip()
        return result

"""
Ahead/behind arithmetic for local branches.
"""

import logging
from typing import Tuple

from .git_tool import GitOperationResult, GitTool

logger = logging.getLogger(__name__)


class GitBranches:
    """Compares local branches with the default branch and their remote."""

    def __init__(self, git: GitTool, default_branch: str = "master", remote_name: str = "origin"):
        self.git = git
        self.default_branch = default_branch
        self.remote_name = remote_name

    def get_distance_between_branches(self, to_master: bool, branch: str) -> GitOperationResult:
        """Run ``rev-list --left-right --count`` for ``branch``.

        With ``to_master`` the left side is the remote default branch,
        otherwise the branch's own remote counterpart. Output is
        ``<behind>\\t<ahead>``.
        """
        left = f"{self.remote_name}/{self.default_branch}" if to_master else f"{self.remote_name}/{branch}"
        logger.debug(f"Executing distance between {left} and {branch}")
        result = self.git.run_git(["rev-list", "--left-right", "--count", f"{left}...{branch}"])
        if not result.success and "fatal" not in result.output:
            # Git reports unknown refs on stderr
            result.output = result.output + result.error
        return result


def parse_branch_distance(output: str) -> Tuple[int, int]:
    """Decode ``behind\\tahead``; any fatal or unreadable output is (0, 0)."""
    if "fatal" in output:
        return 0, 0

    values = output.replace("\n", "").split("\t")
    try:
        return int(values[0]), int(values[-1])
    except ValueError:
        return 0, 0

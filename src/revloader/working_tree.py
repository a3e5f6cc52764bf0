"""
Working tree snapshot for the revision cache.

Builds the synthetic "Local changes" revision from HEAD, the raw
``diff-index`` output for the working tree and the index, and the list of
untracked files. Every query degrades to an empty value on failure.
"""

import logging
import os
import re
from typing import List

from .git_tool import GitTool
from .models import WipRevision

logger = logging.getLogger(__name__)

EXCLUDE_FILE = ".git/info/exclude"
IGNORE_FILE = ".gitignore"

_SHA_RE = re.compile(r"^[0-9a-f]{40}([0-9a-f]{24})?$")


class WorkingTreeSynthesizer:
    """Produces the WipRevision for the current working tree."""

    def __init__(self, git: GitTool):
        self.git = git

    def head_sha(self) -> str:
        """HEAD commit, or an empty string for a repository without commits."""
        result = self.git.run_git(["rev-parse", "--revs-only", "HEAD"])
        if not result.success:
            return ""
        sha = result.output.strip()
        return sha if _SHA_RE.match(sha) else ""

    def diff_index(self, parent_sha: str, cached: bool = False) -> str:
        args = ["diff-index", "--cached", parent_sha] if cached else ["diff-index", parent_sha]
        result = self.git.run_git(args)
        if not result.success:
            logger.debug(f"git {' '.join(args)} failed: {result.error}")
            return ""
        return result.output

    def untracked_files(self) -> List[str]:
        """Untracked, non-ignored paths relative to the repository root."""
        logger.debug("Executing untracked files listing.")

        args = ["ls-files", "--others"]
        if os.path.isfile(os.path.join(self.git.get_working_dir(), EXCLUDE_FILE)):
            args.append(f"--exclude-from={EXCLUDE_FILE}")
        args.append(f"--exclude-per-directory={IGNORE_FILE}")

        result = self.git.run_git(args)
        if not result.success:
            logger.warning(f"Could not list untracked files: {result.error}")
            return []

        # dict keeps first-seen order
        return list(dict.fromkeys(line for line in result.output.split("\n") if line))

    def synthesize(self) -> WipRevision:
        """Build the pending-changes record."""
        logger.debug("Building the WIP revision.")

        untracked = self.untracked_files()
        parent_sha = self.head_sha()

        if not parent_sha:
            return WipRevision(untracked_files=untracked)

        return WipRevision(
            parent_sha=parent_sha,
            diff_index=self.diff_index(parent_sha),
            diff_index_cached=self.diff_index(parent_sha, cached=True),
            untracked_files=untracked,
        )

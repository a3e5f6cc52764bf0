"""
Repository root resolution.

A user may point the loader at any directory inside a working tree; the
loader always works from the top-level directory.
"""

import logging
import os
from typing import Optional

from .git_tool import GitTool

logger = logging.getLogger(__name__)


def resolve_repo_root(git: GitTool, candidate: Optional[str] = None) -> Optional[str]:
    """Return the normalized top-level directory of ``candidate``.

    Runs ``git rev-parse --show-cdup`` inside the candidate and joins the
    relative offset onto it. Returns None when the candidate is not inside a
    repository.
    """
    candidate = candidate or git.get_working_dir()
    result = git.run_git(["rev-parse", "--show-cdup"], cwd=candidate)
    if not result.success:
        logger.debug(f"rev-parse --show-cdup failed in {candidate}: {result.error}")
        return None

    offset = result.output.strip()
    return os.path.normpath(os.path.abspath(os.path.join(candidate, offset)))


def configure_repo_directory(git: GitTool) -> bool:
    """Move the working directory of ``git`` to the repository root.

    On failure the working directory is left unchanged.
    """
    logger.debug("Configuring repository directory.")

    root = resolve_repo_root(git)
    if root is None:
        return False

    git.set_working_dir(root)
    return True

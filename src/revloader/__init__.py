"""
Read-only Git repository loader.

This package provides:
- GitRepoLoader, the single-flight load coordinator
- RevisionsCache, the in-memory store it fills
- The parsers for ``git log -z`` and ``git show-ref -d`` output
"""

from .errors import ConfigurationError, LoadInProgressError, NotARepositoryError, RevLoaderError
from .git_tool import GitOperationResult, GitTool
from .repo_loader import GitRepoLoader, LoadState
from .revisions_cache import RevisionsCache

__version__ = "0.1.0"

__all__ = [
    "GitRepoLoader",
    "LoadState",
    "RevisionsCache",
    "GitTool",
    "GitOperationResult",
    "RevLoaderError",
    "ConfigurationError",
    "NotARepositoryError",
    "LoadInProgressError",
]

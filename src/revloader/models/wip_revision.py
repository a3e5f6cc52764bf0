"""
Pending-changes model for the revision cache.

The WIP revision represents the working tree and the index on top of HEAD.
"""

from pydantic import BaseModel, Field

from .commit_info import WIP_SHA, CommitInfo


class WipRevision(BaseModel):
    """Uncommitted state of the working tree."""

    parent_sha: str = ""
    diff_index: str = ""
    diff_index_cached: str = ""
    untracked_files: list[str] = Field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.diff_index or self.diff_index_cached or self.untracked_files)

    def to_commit_info(self) -> CommitInfo:
        """Build the synthetic commit stored at position 0 of the cache."""
        return CommitInfo(
            sha=WIP_SHA,
            parents=[self.parent_sha] if self.parent_sha else [],
            subject="Local changes",
            sequence_index=0,
        )

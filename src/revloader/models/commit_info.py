"""
Commit model for the revision cache.

This module provides the CommitInfo model for one decoded unit of history.
"""

from pydantic import BaseModel, Field

WIP_SHA = "0" * 40


class CommitInfo(BaseModel):
    """A commit decoded from the log stream."""

    sha: str
    parents: list[str] = Field(default_factory=list)
    boundary_mark: str = ">"
    committer_name: str = ""
    committer_email: str = ""
    author_name: str = ""
    author_email: str = ""
    author_timestamp: int = 0
    subject: str = ""
    body: str = ""
    sequence_index: int = 0

    @property
    def short_sha(self) -> str:
        return self.sha[:8]

    @property
    def is_root(self) -> bool:
        return not self.parents

    @property
    def is_merge(self) -> bool:
        return len(self.parents) > 1

    @property
    def is_boundary(self) -> bool:
        return self.boundary_mark == "-"

    @property
    def is_wip(self) -> bool:
        return self.sha == WIP_SHA

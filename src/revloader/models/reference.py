"""
Reference models for the revision cache.

This module provides the Reference model and the LocalBranchDistances metric.
"""

from enum import Enum

from pydantic import BaseModel, Field


class ReferenceType(str, Enum):
    """Kind of named pointer into history."""

    TAG = "tag"
    LOCAL_BRANCH = "local_branch"
    REMOTE_BRANCH = "remote_branch"


class Reference(BaseModel):
    """A tag or branch pointing at a commit."""

    sha: str
    type: ReferenceType
    name: str


class LocalBranchDistances(BaseModel):
    """Ahead/behind counts of a local branch."""

    ahead_master: int = Field(default=0, ge=0)
    behind_master: int = Field(default=0, ge=0)
    ahead_origin: int = Field(default=0, ge=0)
    behind_origin: int = Field(default=0, ge=0)

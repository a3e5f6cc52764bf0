"""
Data models for the revision loader.

This module provides the records stored in the revision cache and the events
emitted during a load cycle.
"""

from .commit_info import WIP_SHA, CommitInfo
from .wip_revision import WipRevision
from .reference import LocalBranchDistances, Reference, ReferenceType
from .load_events import (
    CancelRequested,
    LoadEvent,
    LoadingFinished,
    LoadingStarted,
    LoadingStep,
)

__all__ = [
    "WIP_SHA",
    "CommitInfo",
    "WipRevision",
    "LocalBranchDistances",
    "Reference",
    "ReferenceType",
    "LoadEvent",
    "LoadingStarted",
    "LoadingStep",
    "LoadingFinished",
    "CancelRequested",
]

"""
In-memory revision cache.

The loader is the only writer during a load cycle. Each public method holds a
re-entrant lock, so single calls are consistent from any thread, but readers
must wait for the loader's LoadingFinished event before treating the
contents as a complete snapshot.
"""

import threading
from typing import Dict, List, Optional

from .models import (
    WIP_SHA,
    CommitInfo,
    LocalBranchDistances,
    Reference,
    ReferenceType,
    WipRevision,
)


class RevisionsCache:
    """Commits, references and branch metrics of one repository."""

    def __init__(self):
        self._lock = threading.RLock()
        self.clear()

    def clear(self) -> None:
        with self._lock:
            self._commits: Dict[str, CommitInfo] = {}
            self._order: Dict[int, str] = {}
            self._references: Dict[str, Dict[ReferenceType, List[str]]] = {}
            self._distances: Dict[str, LocalBranchDistances] = {}
            self._wip: Optional[WipRevision] = None
            self._untracked: List[str] = []
            self._head_sha = ""
            self._expected = 0

    def configure(self, total: int) -> None:
        """Announce the number of tokens in the coming batch."""
        with self._lock:
            self._expected = total

    @property
    def expected_count(self) -> int:
        return self._expected

    # Commits

    def insert_commit_info(self, commit: CommitInfo, sequence_index: int) -> None:
        with self._lock:
            if commit.sequence_index != sequence_index:
                commit = commit.model_copy(update={"sequence_index": sequence_index})
            previous = self._order.get(sequence_index)
            if previous is not None and previous != commit.sha:
                self._commits.pop(previous, None)
            self._commits[commit.sha] = commit
            self._order[sequence_index] = commit.sha

    def get_commit_info(self, sha: str) -> Optional[CommitInfo]:
        with self._lock:
            return self._commits.get(sha)

    def get_commit_info_by_row(self, row: int) -> Optional[CommitInfo]:
        with self._lock:
            sha = self._order.get(row)
            return self._commits.get(sha) if sha is not None else None

    def commits(self) -> List[CommitInfo]:
        """All commits ordered by sequence index, WIP first."""
        with self._lock:
            return [self._commits[self._order[i]] for i in sorted(self._order)]

    def count(self) -> int:
        with self._lock:
            return len(self._order)

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, sha: str) -> bool:
        with self._lock:
            return sha in self._commits

    # Working tree

    def update_wip_commit(self, wip: WipRevision) -> None:
        """Store the pending-changes record at position 0."""
        with self._lock:
            self._wip = wip
            self._untracked = list(wip.untracked_files)
            self.insert_commit_info(wip.to_commit_info(), 0)

    @property
    def wip(self) -> Optional[WipRevision]:
        return self._wip

    @property
    def untracked_files(self) -> List[str]:
        with self._lock:
            return list(self._untracked)

    # References

    def insert_reference(self, sha: str, ref_type: ReferenceType, name: str) -> None:
        with self._lock:
            names = self._references.setdefault(sha, {}).setdefault(ref_type, [])
            if name not in names:
                names.append(name)

    def get_references(self, ref_type: Optional[ReferenceType] = None) -> List[Reference]:
        with self._lock:
            refs = []
            for sha, by_type in self._references.items():
                for kind, names in by_type.items():
                    if ref_type is None or kind == ref_type:
                        refs.extend(Reference(sha=sha, type=kind, name=name) for name in names)
            return refs

    def get_references_for(self, sha: str) -> Dict[ReferenceType, List[str]]:
        with self._lock:
            return {kind: list(names) for kind, names in self._references.get(sha, {}).items()}

    def set_head_sha(self, sha: str) -> None:
        with self._lock:
            self._head_sha = sha

    @property
    def head_sha(self) -> str:
        return self._head_sha

    # Branch distances

    def insert_local_branch_distances(self, name: str, distances: LocalBranchDistances) -> None:
        with self._lock:
            self._distances[name] = distances

    def get_local_branch_distances(self, name: str) -> Optional[LocalBranchDistances]:
        with self._lock:
            return self._distances.get(name)

    def local_branch_distances(self) -> Dict[str, LocalBranchDistances]:
        with self._lock:
            return dict(self._distances)

    def snapshot(self) -> dict:
        """Plain-data view used for comparisons and JSON output."""
        with self._lock:
            return {
                "commits": [c.model_dump() for c in self.commits() if c.sha != WIP_SHA],
                "wip": self._wip.model_dump() if self._wip else None,
                "head": self._head_sha,
                "references": sorted(
                    (r.model_dump(mode="json") for r in self.get_references()),
                    key=lambda r: (r["type"], r["name"]),
                ),
                "distances": {k: v.model_dump() for k, v in sorted(self._distances.items())},
            }

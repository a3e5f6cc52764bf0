"""
Reference classification.

Turns ``git show-ref -d`` output into tags, local branches and remote
branches, and computes ahead/behind counts for every local branch.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .branches import GitBranches, parse_branch_distance
from .git_tool import GitTool
from .models import LocalBranchDistances, Reference, ReferenceType
from .revisions_cache import RevisionsCache

logger = logging.getLogger(__name__)

TAGS_PREFIX = "refs/tags/"
HEADS_PREFIX = "refs/heads/"
REMOTES_PREFIX = "refs/remotes/"
DEREF_SUFFIX = "^{}"


def classify_reference(refname: str) -> Optional[Tuple[ReferenceType, str]]:
    """Map a full refname to its type and short name, or None to skip it."""
    if refname.startswith(TAGS_PREFIX):
        name = refname[len(TAGS_PREFIX):]
        if name.endswith(DEREF_SUFFIX):
            name = name[: -len(DEREF_SUFFIX)]
        return ReferenceType.TAG, name

    if refname.startswith(HEADS_PREFIX):
        return ReferenceType.LOCAL_BRANCH, refname[len(HEADS_PREFIX):]

    if refname.startswith(REMOTES_PREFIX):
        name = refname[len(REMOTES_PREFIX):]
        if name == "HEAD" or name.endswith("/HEAD"):
            return None
        return ReferenceType.REMOTE_BRANCH, name

    return None


def parse_show_ref(output: str) -> List[Reference]:
    """Decode ``<sha> <refname>`` lines into references.

    An annotated tag appears twice: once for the tag object and once with the
    ``^{}`` suffix for the commit. Only the dereferenced line is kept.
    Lightweight tags appear once and are kept as-is.
    """
    entries = []
    for line in output.split("\n"):
        sha, sep, refname = line.strip().partition(" ")
        if sep and sha and refname:
            entries.append((sha, refname))

    dereferenced = {
        refname[: -len(DEREF_SUFFIX)]
        for _, refname in entries
        if refname.startswith(TAGS_PREFIX) and refname.endswith(DEREF_SUFFIX)
    }

    references = []
    for sha, refname in entries:
        if refname in dereferenced:
            continue
        classified = classify_reference(refname)
        if classified is None:
            continue
        ref_type, name = classified
        references.append(Reference(sha=sha, type=ref_type, name=name))
    return references


@dataclass
class ReferenceSnapshot:
    """References and branch distances read in one pass."""

    head_sha: str = ""
    references: List[Reference] = field(default_factory=list)
    distances: Dict[str, LocalBranchDistances] = field(default_factory=dict)


class ReferenceLoader:
    """Fills the cache with references and local branch distances."""

    def __init__(self, git: GitTool, cache: RevisionsCache, branches: Optional[GitBranches] = None):
        self.git = git
        self.cache = cache
        self.branches = branches or GitBranches(git)

    def compute_distances(self, branch: str) -> LocalBranchDistances:
        distances = LocalBranchDistances()

        to_master = self.branches.get_distance_between_branches(True, branch)
        distances.behind_master, distances.ahead_master = parse_branch_distance(to_master.output)

        to_origin = self.branches.get_distance_between_branches(False, branch)
        distances.behind_origin, distances.ahead_origin = parse_branch_distance(to_origin.output)

        return distances

    def collect(self) -> ReferenceSnapshot:
        """Query references and distances without touching the cache."""
        logger.debug("Loading references.")

        result = self.git.run_git(["show-ref", "-d"])
        if not result.success:
            # show-ref exits 1 when the repository has no refs at all
            logger.debug(f"git show-ref -d returned no references: {result.error}")
            return ReferenceSnapshot()

        last_commit = self.git.get_last_commit()
        snapshot = ReferenceSnapshot(
            head_sha=last_commit.output if last_commit.success else "",
            references=parse_show_ref(result.output),
        )

        for reference in snapshot.references:
            if reference.type == ReferenceType.LOCAL_BRANCH:
                snapshot.distances[reference.name] = self.compute_distances(reference.name)

        return snapshot

    def apply(self, snapshot: ReferenceSnapshot) -> None:
        self.cache.set_head_sha(snapshot.head_sha)
        for reference in snapshot.references:
            self.cache.insert_reference(reference.sha, reference.type, reference.name)
        for name, distances in snapshot.distances.items():
            self.cache.insert_local_branch_distances(name, distances)
        logger.debug(f"Loaded {len(snapshot.references)} references.")

    def load_references(self) -> int:
        """Populate references; returns how many were inserted."""
        snapshot = self.collect()
        self.apply(snapshot)
        return len(snapshot.references)

"""Tests for reference classification and branch distances."""

import pytest

from revloader.branches import GitBranches, parse_branch_distance
from revloader.git_tool import GitOperationResult
from revloader.models import ReferenceType
from revloader.references import ReferenceLoader, classify_reference, parse_show_ref
from revloader.revisions_cache import RevisionsCache

A = "a" * 40
B = "b" * 40
C = "c" * 40


class TestClassification:
    """Test refname classification and show-ref parsing."""

    @pytest.mark.parametrize(
        "refname, expected",
        [
            ("refs/tags/v1^{}", (ReferenceType.TAG, "v1")),
            ("refs/tags/v1", (ReferenceType.TAG, "v1")),
            ("refs/tags/release/2.0^{}", (ReferenceType.TAG, "release/2.0")),
            ("refs/heads/main", (ReferenceType.LOCAL_BRANCH, "main")),
            ("refs/heads/feature/login", (ReferenceType.LOCAL_BRANCH, "feature/login")),
            ("refs/remotes/origin/main", (ReferenceType.REMOTE_BRANCH, "origin/main")),
            ("refs/remotes/origin/HEAD", None),
            ("refs/stash", None),
            ("refs/notes/commits", None),
        ],
    )
    def test_classify_reference(self, refname, expected):
        """Test the type and short name of each refname."""
        assert classify_reference(refname) == expected

    def test_keeps_dereferenced_annotated_tag(self):
        """Test that an annotated tag points at its commit."""
        output = f"{B} refs/tags/v1\n{A} refs/tags/v1^{{}}\n"

        refs = parse_show_ref(output)

        assert len(refs) == 1
        assert refs[0].type == ReferenceType.TAG
        assert refs[0].name == "v1"
        assert refs[0].sha == A

    def test_keeps_lightweight_tag(self):
        """Test that a tag without a peeled line is kept."""
        refs = parse_show_ref(f"{A} refs/tags/light\n")
        assert [(r.sha, r.type, r.name) for r in refs] == [(A, ReferenceType.TAG, "light")]

    def test_mixed_output(self):
        """Test a realistic show-ref listing."""
        output = "\n".join(
            [
                f"{A} refs/heads/main",
                f"{B} refs/heads/topic",
                f"{A} refs/remotes/origin/HEAD",
                f"{A} refs/remotes/origin/main",
                f"{C} refs/tags/v1",
                f"{B} refs/tags/v1^{{}}",
                f"{C} refs/stash",
                "",
            ]
        )

        refs = {(r.type, r.name): r.sha for r in parse_show_ref(output)}

        assert refs == {
            (ReferenceType.LOCAL_BRANCH, "main"): A,
            (ReferenceType.LOCAL_BRANCH, "topic"): B,
            (ReferenceType.REMOTE_BRANCH, "origin/main"): A,
            (ReferenceType.TAG, "v1"): B,
        }


class TestBranchDistance:
    """Test ahead/behind queries."""

    @pytest.mark.parametrize(
        "output, expected",
        [
            ("2\t5", (2, 5)),
            ("2\t5\n", (2, 5)),
            ("0\t0\n", (0, 0)),
            ("fatal: ambiguous argument 'origin/master...main'", (0, 0)),
            ("", (0, 0)),
            ("not numbers", (0, 0)),
        ],
    )
    def test_parse_branch_distance(self, output, expected):
        """Test behind/ahead parsing and the zero fallback."""
        assert parse_branch_distance(output) == expected

    def test_distance_command_shapes(self, fake_git):
        """Test the rev-list ranges for the default and the remote branch."""
        git = fake_git()
        branches = GitBranches(git, default_branch="develop", remote_name="upstream")

        branches.get_distance_between_branches(True, "topic")
        branches.get_distance_between_branches(False, "topic")

        assert git.calls == [
            ["rev-list", "--left-right", "--count", "upstream/develop...topic"],
            ["rev-list", "--left-right", "--count", "upstream/topic...topic"],
        ]

    def test_failure_surfaces_fatal_text(self, fake_git):
        """Test that a failed query carries the fatal message in its output."""
        git = fake_git()
        result = GitBranches(git).get_distance_between_branches(True, "main")
        assert not result.success
        assert "fatal" in result.output


class TestReferenceLoader:
    """Test collection of references into the cache."""

    def test_populates_cache(self, fake_git):
        """Test HEAD, references and distances after a load."""
        git = fake_git(
            {
                "show-ref -d": f"{A} refs/heads/main\n{B} refs/remotes/origin/main\n{C} refs/tags/v1\n",
                "rev-parse HEAD": f"{A}\n",
                "rev-list --left-right --count origin/master...main": "2\t5\n",
                "rev-list --left-right --count origin/main...main": "1\t3\n",
            }
        )
        cache = RevisionsCache()

        count = ReferenceLoader(git, cache).load_references()

        assert count == 3
        assert cache.head_sha == A
        assert cache.get_references_for(A) == {ReferenceType.LOCAL_BRANCH: ["main"]}
        assert [r.name for r in cache.get_references(ReferenceType.REMOTE_BRANCH)] == ["origin/main"]
        assert [r.name for r in cache.get_references(ReferenceType.TAG)] == ["v1"]

        distances = cache.get_local_branch_distances("main")
        assert (distances.behind_master, distances.ahead_master) == (2, 5)
        assert (distances.behind_origin, distances.ahead_origin) == (1, 3)

    def test_defaults_distances_to_zero(self, fake_git):
        """Test that failed distance queries count as zero."""
        git = fake_git({"show-ref -d": f"{A} refs/heads/main\n", "rev-parse HEAD": f"{A}\n"})
        git.respond(
            "rev-list --left-right --count origin/master...main",
            GitOperationResult(success=False, error="fatal: ambiguous argument 'origin/master...main'"),
        )
        cache = RevisionsCache()

        ReferenceLoader(git, cache).load_references()

        distances = cache.get_local_branch_distances("main")
        assert distances.model_dump() == {
            "ahead_master": 0,
            "behind_master": 0,
            "ahead_origin": 0,
            "behind_origin": 0,
        }

    def test_without_refs(self, fake_git):
        """Test a repository with no references."""
        git = fake_git({"show-ref -d": GitOperationResult(success=False)})
        cache = RevisionsCache()

        assert ReferenceLoader(git, cache).load_references() == 0
        assert cache.get_references() == []

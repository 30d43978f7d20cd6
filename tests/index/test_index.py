"""Tests for Index population and lookup."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from bloodhound.config.models import BloodhoundConfig, IndexConfig, SearchConfig
from bloodhound.core.errors import InvalidPatternError, RootUnreadableError
from bloodhound.index import Index, IndexedEntry, PopulateStats


class RecordingMatcher:
    """Matcher returning a fixed ranking and recording what it was asked."""

    def __init__(self, ranking: Sequence[object]) -> None:
        self.ranking = list(ranking)
        self.calls: list[tuple[str, list[tuple[str, int]]]] = []

    def rank(self, query: str, candidates: Sequence[tuple[str, int]]) -> list[object]:
        self.calls.append((query, list(candidates)))
        return self.ranking


class TestPopulate:
    """Index population."""

    def test_adds_all_files(self, make_files: Callable[..., Path]) -> None:
        """Every file below the root becomes one entry."""
        root = make_files(["directory/nested_file", "root_file"])
        index = Index()

        stats = index.populate(root)

        assert isinstance(stats, PopulateStats)
        assert stats.files_added == 2
        # a directory's own files come before its subdirectories
        assert [e.path for e in index] == [root / "root_file", root / "directory/nested_file"]
        assert len(index) == 2

    def test_entries_record_key_and_root(self, make_files: Callable[..., Path]) -> None:
        root = make_files(["src/Main.rs"])
        index = Index()

        index.populate(root)

        assert index.entries == (
            IndexedEntry(path=root / "src" / "Main.rs", key="src/main.rs", root=root),
        )

    def test_case_sensitive_keys_keep_case(self, make_files: Callable[..., Path]) -> None:
        root = make_files(["src/Main.rs"])
        index = Index(case_sensitive=True)

        index.populate(root)

        assert index.entries[0].key == "src/Main.rs"
        assert index.case_sensitive is True

    def test_paths_are_unique(self, make_files: Callable[..., Path]) -> None:
        """Populating the same root twice adds nothing the second time."""
        root = make_files(["a.txt", "b/c.txt"])
        index = Index()

        first = index.populate(root)
        second = index.populate(root)

        assert first.files_added == 2
        assert second.files_added == 0
        assert second.duplicates_skipped == 2
        assert len(index) == 2
        assert len({e.path for e in index}) == len(index)

    def test_overlapping_roots_deduplicated(self, make_files: Callable[..., Path]) -> None:
        root = make_files(["a.txt", "src/lib.rs"])
        index = Index()

        stats = index.populate([root, root / "src"])

        assert stats.files_added == 2
        assert stats.duplicates_skipped == 1
        # key comes from the first root that reached the file
        assert [e.key for e in index] == ["a.txt", "src/lib.rs"]

    def test_new_files_appended_on_repopulate(self, make_files: Callable[..., Path]) -> None:
        root = make_files(["a.txt"])
        index = Index()
        index.populate(root)

        (root / "b.txt").write_text("")
        stats = index.populate(root)

        assert stats.files_added == 1
        assert [e.path.name for e in index] == ["a.txt", "b.txt"]

    def test_multiple_roots_in_order(self, make_files: Callable[..., Path]) -> None:
        first = make_files(["one.txt"], name="first")
        second = make_files(["two.txt"], name="second")
        index = Index()

        stats = index.populate([second, first])

        assert stats.roots == [second, first]
        assert [e.path.name for e in index] == ["two.txt", "one.txt"]

    def test_relative_root_made_absolute(
        self, make_files: Callable[..., Path], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        root = make_files(["a.txt"])
        monkeypatch.chdir(root.parent)

        index = Index()
        index.populate(root.name)

        assert index.entries[0].path == root / "a.txt"
        assert index.entries[0].path.is_absolute()

    def test_file_root_indexed(self, make_files: Callable[..., Path]) -> None:
        root = make_files(["notes.md"])
        index = Index()

        index.populate(root / "notes.md")

        assert [e.key for e in index] == ["notes.md"]

    def test_membership(self, make_files: Callable[..., Path]) -> None:
        root = make_files(["a.txt"])
        index = Index()
        index.populate(root)

        assert root / "a.txt" in index
        assert str(root / "a.txt") in index
        assert root / "b.txt" not in index
        assert 42 not in index


class TestPopulateExclusions:
    """Exclusions during population."""

    def test_per_call_exclusions(self, project_root: Path) -> None:
        index = Index()

        stats = index.populate(project_root, exclusions=["target/**", "**/.git/**"])

        assert sorted(e.key for e in index) == [
            "readme.md",
            "src/lib.rs",
            "src/main.rs",
            "src/util/strings.rs",
        ]
        assert stats.excluded == 2

    def test_default_exclusions_apply_every_call(self, project_root: Path) -> None:
        index = Index(exclusions=["target/**"])

        index.populate(project_root, exclusions=["*.md"])

        keys = {e.key for e in index}
        assert not any(k.startswith("target/") for k in keys)
        assert "readme.md" not in keys
        assert ".git/head" in keys
        assert index.exclusions == ("target/**",)

    def test_exclusions_match_original_case(self, make_files: Callable[..., Path]) -> None:
        """Patterns see path text before case folding."""
        root = make_files(["Build/out.o", "build/out.o"])
        index = Index()

        index.populate(root, exclusions=["build/**"])

        assert [e.key for e in index] == ["build/out.o"]
        assert index.entries[0].path == root / "Build" / "out.o"

    def test_invalid_pattern_raised_before_traversal(self, tmp_path: Path) -> None:
        """A bad pattern is reported even when the root would also fail."""
        index = Index()

        with pytest.raises(InvalidPatternError):
            index.populate(tmp_path / "missing", exclusions=["src/[abc"])

        assert len(index) == 0

    def test_invalid_default_pattern_raised_at_construction(self) -> None:
        with pytest.raises(InvalidPatternError):
            Index(exclusions=["[oops"])


class TestPopulateFailures:
    """Fatal root failures."""

    def test_missing_root_raises(self, tmp_path: Path) -> None:
        index = Index()

        with pytest.raises(RootUnreadableError) as exc_info:
            index.populate(tmp_path / "missing")

        assert exc_info.value.root == str(tmp_path / "missing")
        assert len(index) == 0

    def test_entries_before_failing_root_kept(self, make_files: Callable[..., Path]) -> None:
        valid = make_files(["a.txt", "b.txt"])
        missing = valid.parent / "missing"
        index = Index()

        with pytest.raises(RootUnreadableError):
            index.populate([valid, missing])

        assert len(index) == 2
        assert index.find("a") == [valid / "a.txt"]

    def test_roots_after_failing_root_not_walked(self, make_files: Callable[..., Path]) -> None:
        valid = make_files(["a.txt"])
        index = Index()

        with pytest.raises(RootUnreadableError):
            index.populate([valid.parent / "missing", valid])

        assert len(index) == 0


class TestFind:
    """Lookup."""

    def test_main_scenario(self, project_root: Path) -> None:
        """Build output is excluded and only the source file matches."""
        index = Index(exclusions=["target/**"])
        index.populate(project_root)

        assert index.find("main") == [project_root / "src" / "Main.rs"]

    def test_case_sensitive_query(self, project_root: Path) -> None:
        index = Index(case_sensitive=True, exclusions=["target/**"])
        index.populate(project_root)

        assert index.find("main") == []
        assert index.find("Main") == [project_root / "src" / "Main.rs"]

    def test_query_case_folded(self, project_root: Path) -> None:
        index = Index(exclusions=["target/**"])
        index.populate(project_root)

        assert index.find("MAIN") == index.find("main")

    def test_returns_stored_path_objects(self, make_files: Callable[..., Path]) -> None:
        """Results are the exact Path objects held by the index."""
        root = make_files(["src/lib.rs"])
        index = Index()
        index.populate(root)

        (result,) = index.find("lib")

        assert result is index.entries[0].path

    def test_ordering(self, make_files: Callable[..., Path]) -> None:
        root = make_files(["src/hound.rs", "lib/hounds.rs", "Houndfile"])
        index = Index()
        index.populate(root)

        assert index.find("Hound") == [
            root / "Houndfile",
            root / "src" / "hound.rs",
            root / "lib" / "hounds.rs",
        ]

    def test_multiple_terms(self, project_root: Path) -> None:
        index = Index(exclusions=["target/**", "**/.git/**"])
        index.populate(project_root)

        assert index.find("util rs") == [project_root / "src" / "util" / "strings.rs"]

    @pytest.mark.parametrize("query", ["", "   "])
    def test_blank_query_returns_empty(self, project_root: Path, query: str) -> None:
        index = Index()
        index.populate(project_root)

        assert index.find(query) == []

    def test_no_match_returns_empty(self, project_root: Path) -> None:
        index = Index()
        index.populate(project_root)

        assert index.find("zzzz") == []

    def test_empty_index_returns_empty(self) -> None:
        assert Index().find("anything") == []

    def test_limit(self, make_files: Callable[..., Path]) -> None:
        root = make_files(["src/hound.rs", "lib/hounds.rs", "Houndfile"])
        index = Index()
        index.populate(root)

        assert index.find("hound", limit=2) == [root / "Houndfile", root / "src" / "hound.rs"]
        assert index.find("hound", limit=0) == []
        assert index.find("hound", limit=-3) == []
        assert len(index.find("hound", limit=100)) == 3

    def test_default_limit(self, make_files: Callable[..., Path]) -> None:
        root = make_files(["a1", "a2", "a3"])
        index = Index(default_limit=2)
        index.populate(root)

        assert len(index.find("a")) == 2
        assert len(index.find("a", limit=3)) == 3

    def test_find_is_repeatable(self, project_root: Path) -> None:
        index = Index()
        index.populate(project_root)

        assert index.find("rs") == index.find("rs")


class TestMatcherSeam:
    """The index talks to its matcher only through keys and ids."""

    def test_matcher_receives_folded_query_and_keys(
        self, make_files: Callable[..., Path]
    ) -> None:
        root = make_files(["A.txt", "B.txt"])
        matcher = RecordingMatcher([])
        index = Index(matcher=matcher)
        index.populate(root)

        index.find("QUERY")

        assert matcher.calls == [("query", [("a.txt", 0), ("b.txt", 1)])]

    def test_ids_translated_in_matcher_order(self, make_files: Callable[..., Path]) -> None:
        root = make_files(["a.txt", "b.txt", "c.txt"])
        index = Index(matcher=RecordingMatcher([2, 0]))
        index.populate(root)

        assert index.find("x") == [root / "c.txt", root / "a.txt"]

    def test_invalid_ids_dropped(self, make_files: Callable[..., Path]) -> None:
        """Unknown, repeated and non-integer ids never reach the caller."""
        root = make_files(["a.txt", "b.txt"])
        index = Index(matcher=RecordingMatcher([1, -1, 7, 1, "0", 0]))
        index.populate(root)

        assert index.find("x") == [root / "b.txt", root / "a.txt"]

    def test_matcher_errors_propagate(self, make_files: Callable[..., Path]) -> None:
        class BrokenMatcher:
            def rank(self, query: str, candidates: Sequence[tuple[str, int]]) -> list[int]:
                raise RuntimeError("boom")

        root = make_files(["a.txt"])
        index = Index(matcher=BrokenMatcher())
        index.populate(root)

        with pytest.raises(RuntimeError, match="boom"):
            index.find("a")


class TestFromConfig:
    """Index construction from configuration."""

    def test_applies_config(self, project_root: Path) -> None:
        config = BloodhoundConfig(
            index=IndexConfig(case_sensitive=True, exclusions=["target/**"]),
            search=SearchConfig(default_limit=1),
        )

        index = Index.from_config(config)
        index.populate(project_root)

        assert index.case_sensitive is True
        keys = {e.key for e in index}
        assert "src/Main.rs" in keys
        assert not any(k.startswith(("target/", ".git/")) for k in keys)
        assert len(index.find("rs")) == 1

    def test_vcs_dirs_kept_when_disabled(self, project_root: Path) -> None:
        config = BloodhoundConfig(index=IndexConfig(exclude_vcs_dirs=False))

        index = Index.from_config(config)
        index.populate(project_root)

        assert ".git/head" in {e.key for e in index}

    def test_max_depth(self, project_root: Path) -> None:
        config = BloodhoundConfig(index=IndexConfig(max_depth=0))

        index = Index.from_config(config)
        index.populate(project_root)

        assert [e.key for e in index] == ["readme.md"]


class TestConcurrentFind:
    """find() is read-only and safe to call from several threads."""

    def test_parallel_finds_agree(self, project_root: Path) -> None:
        from concurrent.futures import ThreadPoolExecutor

        index = Index(exclusions=["target/**"])
        index.populate(project_root)
        expected = index.find("rs")

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: index.find("rs"), range(64)))

        assert all(r == expected for r in results)
        assert len(index) == 6


class TestPathFidelity:
    """Stored paths are never altered by key derivation."""

    def test_case_collision_keeps_both_paths(self, make_files: Callable[..., Path]) -> None:
        """Names differing only in case stay distinct entries sharing one key."""
        root = make_files(["src/Main.rs", "src/main.rs"])
        if len(list((root / "src").iterdir())) != 2:
            pytest.skip("filesystem is case-insensitive")
        index = Index(case_sensitive=False)

        index.populate(root)

        assert [e.path for e in index] == [root / "src" / "Main.rs", root / "src" / "main.rs"]
        assert [e.key for e in index] == ["src/main.rs", "src/main.rs"]
        assert index.find("main") == [root / "src" / "Main.rs", root / "src" / "main.rs"]

    @pytest.mark.skipif(sys.platform != "linux", reason="needs byte-transparent file names")
    def test_undecodable_name_round_trips_to_disk_bytes(self, tmp_path: Path) -> None:
        """os.fsencode on a stored path gives back the exact on-disk name."""
        root = tmp_path / "root"
        root.mkdir()
        raw = os.fsencode(root) + b"/\xffMain.rs"
        with open(raw, "wb"):
            pass
        index = Index()

        index.populate(root)

        (entry,) = index.entries
        assert os.fsencode(entry.path) == raw
        assert index.find("main") == [entry.path]
        assert os.path.exists(os.fsencode(index.find("main")[0]))

    def test_scenario_rs_query_returns_both_sources(self, make_files: Callable[..., Path]) -> None:
        """With build output excluded, "rs" finds exactly the two source files."""
        root = make_files(["src/Main.rs", "src/lib.rs", "target/debug/main"])
        index = Index(case_sensitive=False)

        index.populate(root, exclusions=["target/**"])

        results = index.find("rs")
        assert len(results) == 2
        assert set(results) == {root / "src" / "Main.rs", root / "src" / "lib.rs"}


class TestMatcherIsolation:
    """Matchers cannot reach the index's internal storage."""

    def test_matcher_receives_immutable_snapshot(self, make_files: Callable[..., Path]) -> None:
        received: list[Sequence[tuple[str, int]]] = []

        class GreedyMatcher:
            def rank(self, query: str, candidates: Sequence[tuple[str, int]]) -> list[int]:
                received.append(candidates)
                return [ident for _, ident in candidates]

        root = make_files(["a.txt", "b.txt"])
        index = Index(matcher=GreedyMatcher())
        index.populate(root)

        index.find("x")
        (root / "c.txt").write_text("")
        index.populate(root)

        assert isinstance(received[0], tuple)
        assert received[0] == (("a.txt", 0), ("b.txt", 1))
        assert index.find("x") == [root / "a.txt", root / "b.txt", root / "c.txt"]

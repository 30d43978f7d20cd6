"""In-memory path index: population and lookup.

The Index owns an append-only, insertion-ordered list of entries and the
case-sensitivity mode their keys were derived with. Population drives the
walker over one or more roots; lookup hands every key to a Matcher and maps
the ranked ids back to the stored paths.

SERIALIZATION:
- populate() is single-writer; concurrent populate calls on one Index must be
  serialized by the caller.
- find() only reads and may run from many threads while no populate is in
  flight.
"""

from __future__ import annotations

import os
import time
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog

from bloodhound.core.errors import RootUnreadableError
from bloodhound.core.excludes import VCS_EXCLUDE_GLOBS
from bloodhound.index._internal.globs import ExclusionSet
from bloodhound.index._internal.normalize import normalize
from bloodhound.index._internal.walker import walk
from bloodhound.index.models import IndexedEntry, PopulateStats
from bloodhound.matching import FragmentMatcher

if TYPE_CHECKING:
    from bloodhound.config.models import BloodhoundConfig
    from bloodhound.matching import Matcher

log = structlog.get_logger()

RootsArg = str | os.PathLike[str] | Iterable[str | os.PathLike[str]]


def _as_roots(roots: RootsArg) -> list[Path]:
    if isinstance(roots, (str, os.PathLike)):
        roots = [roots]
    # abspath, not resolve(): symlinked roots keep the spelling the caller chose
    return [Path(os.path.abspath(root)) for root in roots]


class Index:
    """Searchable in-memory index of file paths.

    The case-sensitivity mode is fixed at construction. Re-keying every entry
    in place is not supported; build a new Index to switch modes.

    Example:
        index = Index(case_sensitive=False)
        index.populate("/home/me/project", exclusions=["target/**", "*.pyc"])
        index.find("main rs")  # -> [PosixPath('.../src/Main.rs'), ...]
    """

    def __init__(
        self,
        case_sensitive: bool = False,
        *,
        matcher: Matcher | None = None,
        exclusions: Iterable[str] = (),
        follow_symlinks: bool = False,
        max_depth: int | None = None,
        default_limit: int | None = None,
    ) -> None:
        """Create an empty index.

        Args:
            case_sensitive: Derive keys (and fold queries) case-sensitively.
            matcher: Ranking collaborator. Defaults to FragmentMatcher.
            exclusions: Patterns applied on every populate call, in addition
                to any passed to populate() itself.
            follow_symlinks: Descend into symlinked directories.
            max_depth: Deepest directory level walked below each root.
            default_limit: Result cap when find() is called without a limit.

        Raises:
            InvalidPatternError: If any default exclusion is malformed.
        """
        self._case_sensitive = case_sensitive
        self._matcher: Matcher = matcher if matcher is not None else FragmentMatcher()
        self._exclusions = ExclusionSet.compile(exclusions)
        self._follow_symlinks = follow_symlinks
        self._max_depth = max_depth
        self._default_limit = default_limit

        self._entries: list[IndexedEntry] = []
        # (key, id) pairs handed to the matcher, kept in step with _entries
        self._candidates: list[tuple[str, int]] = []
        self._ids: dict[Path, int] = {}

    @classmethod
    def from_config(
        cls,
        config: BloodhoundConfig | None = None,
        *,
        matcher: Matcher | None = None,
    ) -> Index:
        """Build an index from loaded configuration (load_config() if omitted)."""
        if config is None:
            from bloodhound.config.loader import load_config

            config = load_config()

        patterns: list[str] = list(VCS_EXCLUDE_GLOBS) if config.index.exclude_vcs_dirs else []
        patterns.extend(config.index.exclusions)
        return cls(
            config.index.case_sensitive,
            matcher=matcher,
            exclusions=patterns,
            follow_symlinks=config.index.follow_symlinks,
            max_depth=config.index.max_depth,
            default_limit=config.search.default_limit,
        )

    @property
    def case_sensitive(self) -> bool:
        return self._case_sensitive

    @property
    def exclusions(self) -> tuple[str, ...]:
        """Patterns applied on every populate call."""
        return self._exclusions.patterns

    @property
    def entries(self) -> tuple[IndexedEntry, ...]:
        """Snapshot of all entries in insertion order."""
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[IndexedEntry]:
        return iter(self._entries)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, os.PathLike)):
            return False
        return Path(path) in self._ids

    def populate(
        self,
        roots: RootsArg,
        exclusions: Iterable[str] | None = None,
    ) -> PopulateStats:
        """Walk roots and append every new, non-excluded file to the index.

        Roots are walked in order. Paths already in the index are skipped, so
        repeating a call (or overlapping roots) adds nothing twice. Entries
        from roots walked before a failing root are kept.

        Args:
            roots: A single root or an iterable of roots.
            exclusions: Extra glob patterns for this call only.

        Returns:
            PopulateStats for this call.

        Raises:
            InvalidPatternError: A pattern is malformed (raised before any traversal).
            RootUnreadableError: A root is missing or cannot be listed.
        """
        patterns = self._exclusions.merged(exclusions) if exclusions else self._exclusions
        root_list = _as_roots(roots)
        stats = PopulateStats(roots=root_list)
        start = time.perf_counter()

        with structlog.contextvars.bound_contextvars(pass_id=uuid4().hex[:12]):
            log.info(
                "index.populate.started",
                roots=[str(r) for r in root_list],
                exclusions=len(patterns),
                case_sensitive=self._case_sensitive,
            )
            for root in root_list:
                try:
                    self._populate_root(root, patterns, stats)
                except RootUnreadableError as e:
                    log.warning(
                        "index.populate.root_failed",
                        root=e.root,
                        reason=e.details.get("reason"),
                        entries=len(self._entries),
                    )
                    raise

            stats.duration_seconds = time.perf_counter() - start
            log.info(
                "index.populate.done",
                added=stats.files_added,
                duplicates=stats.duplicates_skipped,
                excluded=stats.excluded,
                unreadable=stats.unreadable,
                entries=len(self._entries),
                duration_ms=round(stats.duration_seconds * 1000, 1),
            )
        return stats

    def _populate_root(self, root: Path, patterns: ExclusionSet, stats: PopulateStats) -> None:
        def _on_error(_err: OSError) -> None:
            stats.unreadable += 1

        def _on_excluded(_rel: str) -> None:
            stats.excluded += 1

        for walked in walk(
            root,
            patterns,
            follow_symlinks=self._follow_symlinks,
            max_depth=self._max_depth,
            on_error=_on_error,
            on_excluded=_on_excluded,
        ):
            stats.files_seen += 1
            if walked.path in self._ids:
                stats.duplicates_skipped += 1
                continue

            ident = len(self._entries)
            key = normalize(walked.relative, self._case_sensitive)
            self._entries.append(IndexedEntry(path=walked.path, key=key, root=root))
            self._candidates.append((key, ident))
            self._ids[walked.path] = ident
            stats.files_added += 1

    def find(self, query: str, limit: int | None = None) -> list[Path]:
        """Return indexed paths matching query, most relevant first.

        The query is folded with the index's case mode before matching. The
        returned Path objects are the ones stored in the index, not copies.
        An empty query, or one that matches nothing, returns an empty list.

        Args:
            query: Whitespace-separated search terms.
            limit: Maximum number of paths. Defaults to the index's
                default_limit; None there means every match.
        """
        if not query.strip() or not self._entries:
            return []

        limit = self._resolve_limit(limit)
        if limit == 0:
            return []

        count = len(self._entries)
        # the matcher gets a snapshot, never the live list
        candidates = tuple(self._candidates)
        ranked = self._matcher.rank(normalize(query, self._case_sensitive), candidates)

        results: list[Path] = []
        seen: set[int] = set()
        dropped = 0
        for ident in ranked:
            if not isinstance(ident, int) or not 0 <= ident < count or ident in seen:
                dropped += 1
                continue
            seen.add(ident)
            results.append(self._entries[ident].path)
            if limit is not None and len(results) >= limit:
                break

        if dropped:
            log.debug("index.find.dropped_ids", query=query, dropped=dropped)
        log.debug("index.find.done", query=query, results=len(results), candidates=count)
        return results

    def _resolve_limit(self, limit: int | None) -> int | None:
        if limit is None:
            limit = self._default_limit
        return None if limit is None else max(0, limit)

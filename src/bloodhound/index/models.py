"""Index data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, slots=True)
class IndexedEntry:
    """One indexed path and the key it is matched by.

    ``path`` is exactly what traversal produced. ``key`` is derived from the
    root-relative text once, at insertion, using the index's case mode, so
    it lacks the ``root`` prefix that ``path`` (and find()) carries:
    ``/work/proj/src/Main.rs`` is keyed ``src/main.rs``.
    """

    path: Path
    key: str
    root: Path


@dataclass
class PopulateStats:
    """Statistics from a populate call."""

    roots: list[Path] = field(default_factory=list)
    files_seen: int = 0
    files_added: int = 0
    duplicates_skipped: int = 0
    excluded: int = 0
    unreadable: int = 0
    duration_seconds: float = 0.0

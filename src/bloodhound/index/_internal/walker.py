"""Lazy filesystem traversal with eager exclusion pruning.

Walks one root top-down with ``os.walk``, pruning excluded directories in
place so their subtrees are never listed. Names are visited in sorted order,
so two walks over the same snapshot yield the same sequence.
"""

from __future__ import annotations

import os
import stat
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from pathlib import Path

import structlog

from bloodhound.core.errors import RootUnreadableError
from bloodhound.index._internal.globs import ExclusionSet

log = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class WalkedPath:
    """A candidate file: the path as discovered and its root-relative text."""

    path: Path
    relative: str


def _check_root(root: Path) -> os.stat_result:
    try:
        st = root.stat()
    except OSError as e:
        raise RootUnreadableError.for_root(root, e.strerror or str(e)) from e

    if stat.S_ISREG(st.st_mode):
        return st
    if not stat.S_ISDIR(st.st_mode):
        raise RootUnreadableError.for_root(root, "not a directory or regular file")

    try:
        with os.scandir(root):
            pass
    except OSError as e:
        raise RootUnreadableError.for_root(root, e.strerror or str(e)) from e
    return st


def walk(
    root: Path,
    exclusions: ExclusionSet | None = None,
    *,
    follow_symlinks: bool = False,
    max_depth: int | None = None,
    on_error: Callable[[OSError], None] | None = None,
    on_excluded: Callable[[str], None] | None = None,
) -> Iterator[WalkedPath]:
    """Yield every non-excluded regular file beneath ``root``.

    The root is checked when iteration starts. A root that is itself a regular
    file yields just that file.

    Args:
        root: Directory (or file) to walk.
        exclusions: Compiled exclusion globs, matched against root-relative paths.
        follow_symlinks: Descend into symlinked directories. Each real directory
            is visited at most once, so link cycles terminate.
        max_depth: Deepest directory level to list below the root (0 = root only).
        on_error: Called with each OSError from an unreadable descendant.
        on_excluded: Called with the relative path of each excluded file or
            pruned directory.

    Raises:
        RootUnreadableError: The root is missing or cannot be listed.
    """
    exclusions = exclusions or ExclusionSet()
    root_stat = _check_root(root)

    if stat.S_ISREG(root_stat.st_mode):
        if exclusions.matches(root.name):
            if on_excluded is not None:
                on_excluded(root.name)
            return
        yield WalkedPath(root, root.name)
        return

    def _on_walk_error(err: OSError) -> None:
        log.debug("walker.unreadable", path=err.filename, reason=err.strerror)
        if on_error is not None:
            on_error(err)

    visited: set[tuple[int, int]] = {(root_stat.st_dev, root_stat.st_ino)}

    for dirpath, dirnames, filenames in os.walk(
        root, onerror=_on_walk_error, followlinks=follow_symlinks
    ):
        rel_dir = Path(dirpath).relative_to(root).as_posix()
        if rel_dir == ".":
            rel_dir = ""
        depth = rel_dir.count("/") + 1 if rel_dir else 0

        kept: list[str] = []
        if max_depth is None or depth < max_depth:
            for name in sorted(dirnames):
                rel = f"{rel_dir}/{name}" if rel_dir else name
                if exclusions.prunes(rel):
                    if on_excluded is not None:
                        on_excluded(rel)
                    continue
                if follow_symlinks:
                    try:
                        st = os.stat(os.path.join(dirpath, name))
                    except OSError as e:
                        _on_walk_error(e)
                        continue
                    ident = (st.st_dev, st.st_ino)
                    if ident in visited:
                        log.debug("walker.cycle_skipped", path=rel)
                        continue
                    visited.add(ident)
                kept.append(name)
        # Prune in-place: os.walk only descends into what is left
        dirnames[:] = kept

        for name in sorted(filenames):
            rel = f"{rel_dir}/{name}" if rel_dir else name
            if exclusions.matches(rel):
                if on_excluded is not None:
                    on_excluded(rel)
                continue
            full = os.path.join(dirpath, name)
            # Skips broken symlinks, sockets, FIFOs
            if not os.path.isfile(full):
                continue
            yield WalkedPath(Path(full), rel)

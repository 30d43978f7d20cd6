"""Canonical exclude patterns.

VCS internals are pruned by default when an Index is built from config
(``index.exclude_vcs_dirs``). A bare ``Index`` applies only the patterns the
caller hands it.
"""

from __future__ import annotations

VCS_DIRS: frozenset[str] = frozenset(
    (
        ".git",
        ".svn",
        ".hg",
        ".bzr",
    )
)

# "**/<dir>/**" prunes the directory itself at any depth.
VCS_EXCLUDE_GLOBS: tuple[str, ...] = tuple(f"**/{d}/**" for d in sorted(VCS_DIRS))

__all__ = [
    "VCS_DIRS",
    "VCS_EXCLUDE_GLOBS",
]

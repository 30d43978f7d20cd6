"""Shared fixtures for index tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest


def make_tree(root: Path, files: list[str]) -> Path:
    """Create empty files (and their parent directories) below root."""
    for rel in files:
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("")
    return root


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """A small project tree with build output and VCS internals."""
    return make_tree(
        tmp_path / "project",
        [
            "src/Main.rs",
            "src/lib.rs",
            "src/util/strings.rs",
            "target/debug/main",
            "target/debug/main.d",
            "README.md",
            ".git/HEAD",
            ".git/objects/ab/cdef",
        ],
    )


@pytest.fixture
def make_files(tmp_path: Path) -> Callable[..., Path]:
    """Factory creating a tree under tmp_path from relative file names."""

    def _make(files: list[str], name: str = "root") -> Path:
        return make_tree(tmp_path / name, files)

    return _make

"""Exclusion glob compilation and matching.

Patterns are matched against root-relative POSIX paths (``src/lib.rs``):

- ``*`` matches within one path segment, ``?`` matches one character
- ``[...]`` / ``[!...]`` character classes, never matching ``/``
- ``**`` as a whole segment matches zero or more segments
- A pattern without ``/`` matches the last component at any depth
- A leading ``/`` anchors to the root, a trailing ``/`` means the directory
  and everything below it

Directories are pruned when the directory itself matches, or when every
possible descendant would (``target/**`` prunes ``target``).
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import PurePath

from bloodhound.core.errors import InvalidPatternError

__all__ = [
    "ExclusionSet",
    "excluded",
    "translate",
]

_ANY_SEGMENTS = "(?:[^/]*/)*"


def _translate_class(segment: str, start: int, pattern: str) -> tuple[str, int]:
    """Translate the character class opening at ``segment[start]``.

    Returns the regex fragment and the index just past the closing bracket.
    """
    j = start + 1
    if j < len(segment) and segment[j] in "!^":
        j += 1
    if j < len(segment) and segment[j] == "]":
        j += 1
    while j < len(segment) and segment[j] != "]":
        j += 1
    if j >= len(segment):
        raise InvalidPatternError.for_pattern(pattern, "unterminated character class")

    content = segment[start + 1 : j]
    content = content.replace("\\", "\\\\").replace("[", "\\[").replace("]", "\\]")
    if content[0] in "!^":
        return f"[^/{content[1:]}]", j + 1
    # a range such as [+-0] spans "/"
    return f"(?!/)[{content}]", j + 1


def _translate_segment(segment: str, pattern: str) -> str:
    out: list[str] = []
    i = 0
    while i < len(segment):
        c = segment[i]
        if c == "*":
            out.append("[^/]*")
            while i + 1 < len(segment) and segment[i + 1] == "*":
                i += 1
            i += 1
        elif c == "?":
            out.append("[^/]")
            i += 1
        elif c == "[":
            fragment, i = _translate_class(segment, i, pattern)
            out.append(fragment)
        else:
            out.append(re.escape(c))
            i += 1
    return "".join(out)


def translate(pattern: str) -> str:
    """Translate one exclusion glob into an (unanchored) regex body.

    Raises:
        InvalidPatternError: Empty pattern or malformed character class.
    """
    if not pattern.strip():
        raise InvalidPatternError.for_pattern(pattern, "pattern is empty")

    body = pattern
    anchored = body.startswith("/")
    directory_only = body.endswith("/")
    body = body.strip("/")
    if not body:
        raise InvalidPatternError.for_pattern(pattern, "pattern has no path components")

    anchored = anchored or "/" in body
    if directory_only:
        body = f"{body}/**"
    if not anchored:
        body = f"**/{body}"

    segments = body.split("/")
    parts: list[str] = []
    for i, segment in enumerate(segments):
        last = i == len(segments) - 1
        if segment == "**":
            parts.append(".*" if last else _ANY_SEGMENTS)
        else:
            parts.append(_translate_segment(segment, pattern))
            if not last:
                parts.append("/")
    return "".join(parts)


@dataclass(frozen=True)
class ExclusionSet:
    """A compiled, immutable set of exclusion globs.

    All patterns are folded into a single alternation so each candidate costs
    one regex match regardless of how many patterns are configured.
    """

    patterns: tuple[str, ...] = ()
    _regex: re.Pattern[str] | None = field(default=None, repr=False, compare=False)

    @classmethod
    def compile(cls, patterns: Iterable[str]) -> ExclusionSet:
        """Validate and compile patterns, dropping duplicates but keeping order.

        Raises:
            InvalidPatternError: On the first malformed pattern.
        """
        unique = tuple(dict.fromkeys(patterns))
        bodies: list[str] = []
        for pattern in unique:
            body = translate(pattern)
            try:
                re.compile(body)
            except re.error as e:
                raise InvalidPatternError.for_pattern(pattern, str(e)) from e
            bodies.append(body)

        regex = re.compile("|".join(f"(?:{b})" for b in bodies)) if bodies else None
        return cls(patterns=unique, _regex=regex)

    def matches(self, rel_path: str) -> bool:
        return self._regex is not None and self._regex.fullmatch(rel_path) is not None

    def prunes(self, rel_dir: str) -> bool:
        """Check if a directory and its whole subtree are excluded."""
        if self._regex is None:
            return False
        return (
            self._regex.fullmatch(rel_dir) is not None
            or self._regex.fullmatch(f"{rel_dir}/") is not None
        )

    def merged(self, patterns: Iterable[str]) -> ExclusionSet:
        return ExclusionSet.compile((*self.patterns, *patterns))

    def __bool__(self) -> bool:
        return bool(self.patterns)

    def __len__(self) -> int:
        return len(self.patterns)


def excluded(candidate: str | PurePath, patterns: ExclusionSet | Iterable[str]) -> bool:
    """Return True if the root-relative candidate matches any pattern."""
    if not isinstance(patterns, ExclusionSet):
        patterns = ExclusionSet.compile(patterns)
    rel = candidate.as_posix() if isinstance(candidate, PurePath) else candidate
    return patterns.matches(rel)

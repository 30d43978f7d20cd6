"""Fragment-based fuzzy matching.

A query term matches a key when its characters appear in the key in order.
Matching terms are scored by the runs ("fragments") of consecutive key
characters they line up with: longer runs score quadratically higher, query
characters missing from the key cost a penalty, and longer keys are scaled
down so short, dense matches rank first.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(slots=True)
class _Fragment:
    """A run of consecutive key characters matched by the query."""

    start: int
    length: int = 1

    def next_index(self) -> int:
        return self.start + self.length


def _char_positions(key: str) -> dict[str, set[int]]:
    positions: dict[str, set[int]] = {}
    for i, c in enumerate(key):
        positions.setdefault(c, set()).add(i)
    return positions


def is_subsequence(term: str, key: str) -> bool:
    it = iter(key)
    return all(c in it for c in term)


def similarity(term: str, key: str) -> float:
    """Score one query term against a key.

    Exact matches score 1.0. A term made entirely of characters the key lacks
    scores 0.0.
    """
    if term == key:
        return 1.0
    if not key:
        return 0.0

    key_length = len(key)
    positions = _char_positions(key)
    fragments: list[_Fragment] = []
    missing = 0

    for c in term:
        occurrences = positions.get(c)
        if occurrences is None:
            missing += 1
            continue

        unaccounted = set(occurrences)
        for fragment in fragments:
            target = fragment.next_index()
            if target in occurrences:
                unaccounted.discard(target)
                fragment.length += 1
        fragments.extend(_Fragment(start) for start in sorted(unaccounted))

    if missing >= key_length:
        return 0.0
    penalty = (key_length - missing) / key_length
    fragment_score = sum(f.length**2 for f in fragments)
    return fragment_score * penalty / key_length


class FragmentMatcher:
    """Default term-driven matcher.

    The query is split on whitespace. A candidate must contain every term as
    an in-order subsequence; its score is the sum of per-term similarities.
    Ties keep candidate order.
    """

    def rank(self, query: str, candidates: Sequence[tuple[str, int]]) -> list[int]:
        terms = query.split()
        if not terms:
            return []

        scored: list[tuple[float, int]] = []
        for key, ident in candidates:
            if not all(is_subsequence(term, key) for term in terms):
                continue
            scored.append((sum(similarity(term, key) for term in terms), ident))

        # sort is stable, so equal scores keep insertion order
        scored.sort(key=lambda item: item[0], reverse=True)
        return [ident for _, ident in scored]

"""Matcher protocol."""

from collections.abc import Sequence
from typing import Protocol


class Matcher(Protocol):
    """Protocol for ranking search keys against a query.

    The index hands over every key it holds, each paired with an opaque id.
    Implementations may omit candidates that do not match at all.
    """

    def rank(self, query: str, candidates: Sequence[tuple[str, int]]) -> Sequence[int]:
        """Rank candidates by descending relevance.

        Args:
            query: Query text, already normalized with the index's case mode.
            candidates: ``(key, id)`` pairs in index insertion order.

        Returns:
            Ids of matching candidates, most relevant first.
        """
        ...

"""Search-key derivation.

Keys are derived once per entry from the path's root-relative text. Case
folding only ever touches the derived key; the stored Path is left as
traversal produced it.
"""

from __future__ import annotations


def normalize(text: str, case_sensitive: bool) -> str:
    """Derive a search key from text.

    ``str.casefold`` is locale-independent, so the same input always folds to
    the same key (``"Straße"`` -> ``"strasse"``).
    """
    return text if case_sensitive else text.casefold()


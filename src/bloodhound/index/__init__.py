"""Index module - in-memory fuzzy path index.

Public API is in `bloodhound.index.ops`:
- Index: population and lookup
- IndexedEntry, PopulateStats: result types

The population pipeline (glob filter, walker, key normalizer) lives in
`bloodhound.index._internal/`.
"""

from bloodhound.index._internal import ExclusionSet, excluded
from bloodhound.index.models import IndexedEntry, PopulateStats
from bloodhound.index.ops import Index

__all__ = [
    "Index",
    "IndexedEntry",
    "PopulateStats",
    "ExclusionSet",
    "excluded",
]

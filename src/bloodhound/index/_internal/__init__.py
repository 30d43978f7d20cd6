"""Internal population pipeline: glob filter, walker, key normalizer."""

from bloodhound.index._internal.globs import ExclusionSet, excluded, translate
from bloodhound.index._internal.normalize import normalize
from bloodhound.index._internal.walker import WalkedPath, walk

__all__ = [
    "ExclusionSet",
    "WalkedPath",
    "excluded",
    "normalize",
    "translate",
    "walk",
]

"""Matching module - ranks search keys against queries.

The index depends only on the ``Matcher`` protocol; ``FragmentMatcher`` is
the default implementation.
"""

from bloodhound.matching.base import Matcher
from bloodhound.matching.fragment import FragmentMatcher, is_subsequence, similarity

__all__ = ["FragmentMatcher", "Matcher", "is_subsequence", "similarity"]

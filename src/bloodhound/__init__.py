"""Bloodhound - fuzzy, term-driven lookup over an in-memory index of file paths."""

from bloodhound.config import BloodhoundConfig, load_config
from bloodhound.core import (
    BloodhoundError,
    ConfigError,
    ErrorCode,
    InvalidPatternError,
    RootUnreadableError,
    configure_logging,
    get_logger,
)
from bloodhound.index import ExclusionSet, Index, IndexedEntry, PopulateStats, excluded
from bloodhound.matching import FragmentMatcher, Matcher

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Index
    "Index",
    "IndexedEntry",
    "PopulateStats",
    "ExclusionSet",
    "excluded",
    # Matching
    "Matcher",
    "FragmentMatcher",
    # Config
    "BloodhoundConfig",
    "load_config",
    # Errors
    "BloodhoundError",
    "ConfigError",
    "ErrorCode",
    "InvalidPatternError",
    "RootUnreadableError",
    # Logging
    "configure_logging",
    "get_logger",
]

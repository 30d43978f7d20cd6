"""Core module exports."""

from bloodhound.core.errors import (
    BloodhoundError,
    ConfigError,
    ErrorCode,
    InvalidPatternError,
    RootUnreadableError,
)
from bloodhound.core.logging import configure_logging, get_logger

__all__ = [
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

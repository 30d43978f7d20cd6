"""Bloodhound error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Index
"""

from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Index (3xxx)
    INDEX_ROOT_UNREADABLE = 3001
    INDEX_INVALID_PATTERN = 3002


@dataclass(frozen=True)
class BloodhoundError(Exception):
    """Base error with structured context.

    Not slotted, so contextlib can reassign __traceback__ on subclass
    instances leaving a with block.
    """

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'INDEX_ROOT_UNREADABLE')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(BloodhoundError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class RootUnreadableError(BloodhoundError):
    """A populate root is missing or cannot be listed.

    Fatal to the populate call that hit it. Entries gathered before the
    failure stay in the index.
    """

    @property
    def root(self) -> str:
        return str(self.details.get("root", ""))

    @classmethod
    def for_root(cls, root: Path | str, reason: str) -> "RootUnreadableError":
        return cls(
            code=ErrorCode.INDEX_ROOT_UNREADABLE,
            message=f"Cannot read index root {root}: {reason}",
            details={"root": str(root), "reason": reason},
        )


class InvalidPatternError(BloodhoundError):
    """A malformed exclusion glob, reported before any traversal begins."""

    @property
    def pattern(self) -> str:
        return str(self.details.get("pattern", ""))

    @classmethod
    def for_pattern(cls, pattern: str, reason: str) -> "InvalidPatternError":
        return cls(
            code=ErrorCode.INDEX_INVALID_PATTERN,
            message=f"Invalid exclusion pattern {pattern!r}: {reason}",
            details={"pattern": pattern, "reason": reason},
        )

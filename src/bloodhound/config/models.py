"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (BLOODHOUND__SECTION__KEY)
3. Project YAML (.bloodhound/config.yaml)
4. Global YAML (~/.config/bloodhound/config.yaml)
5. Built-in defaults (this file)

Examples:
    BLOODHOUND__LOGGING__LEVEL=DEBUG
    BLOODHOUND__INDEX__CASE_SENSITIVE=true
    BLOODHOUND__INDEX__MAX_DEPTH=12
    BLOODHOUND__SEARCH__DEFAULT_LIMIT=50
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from bloodhound.config.constants import FIND_MAX_LIMIT

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        BLOODHOUND__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every unreadable directory during populate.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class IndexConfig(BaseModel):
    """Index population configuration.

    Env vars:
        BLOODHOUND__INDEX__CASE_SENSITIVE: Match keys case-sensitively
        BLOODHOUND__INDEX__EXCLUDE_VCS_DIRS: Prune .git, .hg, .svn, .bzr
        BLOODHOUND__INDEX__FOLLOW_SYMLINKS: Descend into symlinked directories
        BLOODHOUND__INDEX__MAX_DEPTH: Bound recursion below each root
    """

    case_sensitive: bool = Field(
        default=False,
        description="Fixed for the index lifetime. Changing it requires rebuilding the index.",
    )
    exclusions: list[str] = Field(
        default_factory=list,
        description="Glob patterns pruned during every populate (e.g. 'target/**', '*.pyc').",
    )
    exclude_vcs_dirs: bool = Field(
        default=True,
        description="Prune version control internals (.git, .hg, .svn, .bzr).",
    )
    follow_symlinks: bool = Field(
        default=False,
        description="Descend into symlinked directories. Cycles are detected and skipped.",
    )
    max_depth: int | None = Field(
        default=None,
        description="Maximum directory depth below each root. None walks the whole tree. "
        "TRADEOFF: Lower values bound populate latency but hide deep files.",
    )

    @field_validator("exclusions")
    @classmethod
    def validate_exclusions(cls, v: list[str]) -> list[str]:
        for pattern in v:
            if not pattern.strip():
                raise ValueError("Exclusion patterns must be non-empty")
        return v

    @field_validator("max_depth")
    @classmethod
    def validate_max_depth(cls, v: int | None) -> int | None:
        if v is not None and v < 0:
            raise ValueError(f"max_depth must be >= 0, got {v}")
        return v


class SearchConfig(BaseModel):
    """Lookup configuration.

    Env vars:
        BLOODHOUND__SEARCH__DEFAULT_LIMIT: Default number of paths find() returns
    """

    default_limit: int | None = Field(
        default=None,
        description="Default result count for find(). None returns every match. "
        "TRADEOFF: Pickers rarely render more than a screenful.",
    )

    @field_validator("default_limit")
    @classmethod
    def validate_default_limit(cls, v: int | None) -> int | None:
        if v is not None and not (1 <= v <= FIND_MAX_LIMIT):
            raise ValueError(f"default_limit must be 1-{FIND_MAX_LIMIT}, got {v}")
        return v


class BloodhoundConfig(BaseModel):
    """Root configuration for Bloodhound.

    All settings can be configured via:
    1. Environment variables: BLOODHOUND__SECTION__KEY
    2. YAML config files (project or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    index: IndexConfig = Field(default_factory=IndexConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)

"""Config module exports."""

from bloodhound.config.loader import load_config
from bloodhound.config.models import (
    BloodhoundConfig,
    IndexConfig,
    LoggingConfig,
    LogOutputConfig,
    SearchConfig,
)

__all__ = [
    "load_config",
    "BloodhoundConfig",
    "IndexConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "SearchConfig",
]

"""Configuration constants.

Values here are not user-configurable. For configurable values, see
models.py (IndexConfig, SearchConfig, etc.).
"""

# =============================================================================
# Lookup Limits
# =============================================================================

FIND_MAX_LIMIT = 10_000
"""Upper bound for search.default_limit. Explicit find() limits are not capped."""

# =============================================================================
# Config File Locations
# =============================================================================

CONFIG_DIR_NAME = ".bloodhound"
"""Per-project config directory, relative to the project root."""

CONFIG_FILE_NAME = "config.yaml"
"""Config file name inside CONFIG_DIR_NAME and the global config directory."""

ENV_PREFIX = "BLOODHOUND__"
"""Environment variable prefix (BLOODHOUND__SECTION__KEY)."""

"""Shared constants for csvlocalization.

Centralizes defaults used by configuration, ingestion, resolution and the
reload pipeline. Placing them here avoids circular imports between the
runtime, resources and localization packages.

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # CSV layout defaults
    "DEFAULT_SEPARATOR",
    "DEFAULT_ENCODING",
    "DEFAULT_KEY_COLUMN",
    "DEFAULT_SOURCE",
    "CSV_EXTENSION",
    # Resolution
    "LOCALIZATION_ARG_PREFIX",
    "MAX_SUBSTITUTION_DEPTH",
    # Reload pipeline
    "DEFAULT_RELOAD_DEBOUNCE",
    # Caches
    "MAX_LOCALE_CACHE_SIZE",
    # FTP transport
    "DEFAULT_FTP_PORT",
    "DEFAULT_FTP_TIMEOUT",
]

# ============================================================================
# CSV LAYOUT DEFAULTS
# ============================================================================

DEFAULT_SEPARATOR: str = ","

DEFAULT_ENCODING: str = "utf-8"

DEFAULT_KEY_COLUMN: str = "key"

# Resource name of the table in single-file mode. May be a glob pattern.
DEFAULT_SOURCE: str = "localization.csv"

# One-file-per-culture mode looks for "<cultureCode>.csv".
CSV_EXTENSION: str = ".csv"

# ============================================================================
# RESOLUTION
# ============================================================================

# String arguments starting with this prefix name a nested localization key.
LOCALIZATION_ARG_PREFIX: str = "$L."

# Maximum number of chained "$L." hops resolved for a single argument.
# A chain longer than this is treated as a reference cycle.
MAX_SUBSTITUTION_DEPTH: int = 10

# ============================================================================
# RELOAD PIPELINE
# ============================================================================

# Seconds to wait after a raw change notification before reloading.
# A single save usually produces several filesystem events.
DEFAULT_RELOAD_DEBOUNCE: float = 0.1

# ============================================================================
# CACHE LIMITS
# ============================================================================

# Maximum cached parsed culture codes (Babel Locale lookups, parent codes).
MAX_LOCALE_CACHE_SIZE: int = 128

# ============================================================================
# FTP TRANSPORT
# ============================================================================

DEFAULT_FTP_PORT: int = 21

DEFAULT_FTP_TIMEOUT: float = 30.0

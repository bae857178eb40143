"""csvlocalization - localized strings from hot-reloaded CSV tables.

Resolves display strings by key and culture from CSV resources stored in a
local directory or on an FTP server, with culture fallback (requested,
parent, default), a configurable missing-key policy, "$L." argument
substitution and positional formatting. Sources are re-ingested in the
background when they change; lookups keep working on the previous data
until the new table is swapped in.

Public API:
    CsvLocalization - Facade: load, resolve, reload, close
    LocalizationConfig - Localization options
    FileSystemResourceConfig, FtpResourceConfig - Resource transports
    use_culture - Context manager setting the ambient culture

Exceptions:
    LocalizationError - Base exception class
    MissingLocalizationKeyError - Key not found (THROW_EXCEPTION policy)
    MissingResourceFileError - Resource file not found
    ResourceAccessError - Resource could not be read
    IngestionError - Malformed CSV resource

Submodules:
    csvlocalization.localization - Table model, ingestion, reload coordination
    csvlocalization.resources - Resource transports and file manager
    csvlocalization.runtime - Store, locking and resolution engine
    csvlocalization.locale_utils - Culture code helpers (Babel)
"""

# Essential Public API - Minimal exports for clean namespace
from .config import FileSystemResourceConfig, FtpResourceConfig, LocalizationConfig
from .enums import CsvReadMethod, MissingFileHandling, MissingKeyHandling
from .errors import (
    IngestionError,
    LocalizationError,
    MissingLocalizationKeyError,
    MissingResourceFileError,
    ResourceAccessError,
)
from .localization import CsvLocalization, LocalizationTable
from .runtime import use_culture

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("csvlocalization")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "CsvLocalization",
    "CsvReadMethod",
    "FileSystemResourceConfig",
    "FtpResourceConfig",
    "IngestionError",
    "LocalizationConfig",
    "LocalizationError",
    "LocalizationTable",
    "MissingFileHandling",
    "MissingKeyHandling",
    "MissingLocalizationKeyError",
    "MissingResourceFileError",
    "ResourceAccessError",
    "__version__",
    "use_culture",
]

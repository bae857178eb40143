"""Enumerations for csvlocalization configuration and state.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum


class MissingKeyHandling(StrEnum):
    """What GetString returns when a key has no translation after fallback."""

    RETURN_EMPTY_STRING = "return_empty_string"
    """Return an empty string."""

    RETURN_KEY = "return_key"
    """Return the requested key verbatim."""

    THROW_EXCEPTION = "throw_exception"
    """Raise MissingLocalizationKeyError."""


class MissingFileHandling(StrEnum):
    """What a file lookup does when the requested resource is absent."""

    IGNORE = "ignore"
    """Return None (get_file) or skip the resource (ingestion)."""

    THROW_EXCEPTION = "throw_exception"
    """Raise MissingResourceFileError."""


class CsvReadMethod(StrEnum):
    """Layout of the CSV localization resources."""

    SINGLE_FILE_ALL_CULTURES = "single_file_all_cultures"
    """One table: key column plus one column per culture code."""

    ONE_FILE_PER_CULTURE = "one_file_per_culture"
    """One "<cultureCode>.csv" per supported culture: key column plus one value column."""


class ReloadState(StrEnum):
    """State of the reload coordinator."""

    IDLE = "idle"
    RELOADING = "reloading"


class WatchEventKind(StrEnum):
    """Kind of notification emitted by a resource watcher."""

    CHANGED = "changed"
    """A resource was created, modified or deleted."""

    RENAMED = "renamed"
    """A resource was moved or renamed."""

    ERROR = "error"
    """The watcher itself failed."""


__all__ = [
    "CsvReadMethod",
    "MissingFileHandling",
    "MissingKeyHandling",
    "ReloadState",
    "WatchEventKind",
]

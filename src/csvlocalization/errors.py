"""Exception hierarchy for csvlocalization.

Every error raised by the library derives from LocalizationError so callers
can catch the whole family at once. Transport failures are chained to the
original exception with ``raise ... from``.

Hierarchy:
    LocalizationError
    ├─ MissingLocalizationKeyError (key absent after fallback, ThrowException policy)
    ├─ MissingResourceFileError (file name not in the current snapshot)
    ├─ ResourceAccessError (I/O, permission or transport failure while reading)
    ├─ IngestionError (malformed CSV structure, aborts the ingestion pass)
    ├─ FormatMismatchError (placeholder/argument count disagreement)
    └─ SubstitutionError ("$L." argument could not be resolved)
       ├─ SubstitutionCycleError
       └─ SubstitutionDepthError

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

__all__ = [
    "FormatMismatchError",
    "IngestionError",
    "LocalizationError",
    "MissingLocalizationKeyError",
    "MissingResourceFileError",
    "ResourceAccessError",
    "SubstitutionCycleError",
    "SubstitutionDepthError",
    "SubstitutionError",
]


class LocalizationError(Exception):
    """Base exception for all csvlocalization errors."""


class MissingLocalizationKeyError(LocalizationError):
    """Localization key has no translation for the requested culture.

    Raised only under MissingKeyHandling.THROW_EXCEPTION, after the whole
    fallback chain (culture, parent culture, default culture) was tried.

    Attributes:
        key: The requested localization key
        culture_name: Culture code the key was requested for
    """

    def __init__(self, key: str, culture_name: str | None = None) -> None:
        """Initialize MissingLocalizationKeyError.

        Args:
            key: The requested localization key
            culture_name: Culture code the key was requested for
        """
        super().__init__(
            f"The localization key '{key}' was not found in the culture '{culture_name}'."
        )
        self.key = key
        self.culture_name = culture_name


class MissingResourceFileError(LocalizationError, LookupError):
    """Requested resource file is not part of the current snapshot.

    Also a LookupError so generic lookup handlers can catch it.

    Attributes:
        file_name: The name that was looked up
    """

    def __init__(self, file_name: str) -> None:
        """Initialize MissingResourceFileError.

        Args:
            file_name: The name that was looked up
        """
        super().__init__(f"The resource file '{file_name}' was not found.")
        self.file_name = file_name


class ResourceAccessError(LocalizationError):
    """Reading or enumerating a resource failed.

    Wraps OSError, FTP protocol errors and TLS failures. Always surfaced to
    the caller attempting the read.

    Attributes:
        uri: URI of the resource or source being accessed (may be empty)
    """

    def __init__(self, message: str, *, uri: str = "") -> None:
        """Initialize ResourceAccessError.

        Args:
            message: Human-readable error description
            uri: URI of the resource or source being accessed
        """
        super().__init__(message)
        self.uri = uri


class IngestionError(LocalizationError):
    """CSV resource is structurally invalid.

    Covers a missing or duplicated header, a missing key column, no usable
    culture column, and an undecodable stream. Aborts the whole ingestion
    pass; no partial table is produced.

    Attributes:
        source: Name of the resource being parsed
    """

    def __init__(self, message: str, *, source: str = "") -> None:
        """Initialize IngestionError.

        Args:
            message: Human-readable error description
            source: Name of the resource being parsed
        """
        super().__init__(message)
        self.source = source


class FormatMismatchError(LocalizationError):
    """Template placeholders do not match the supplied arguments.

    Attributes:
        template: The template that failed to format
        expected: Number of positional arguments the template needs,
            None when the template itself could not be parsed
        actual: Number of arguments supplied
    """

    def __init__(self, template: str, expected: int | None, actual: int) -> None:
        """Initialize FormatMismatchError.

        Args:
            template: The template that failed to format
            expected: Number of positional arguments the template needs
            actual: Number of arguments supplied
        """
        if expected is None:
            message = f"Template {template!r} is not a valid format string"
        else:
            message = (
                f"Template {template!r} expects {expected} argument(s), got {actual}"
            )
        super().__init__(message)
        self.template = template
        self.expected = expected
        self.actual = actual


class SubstitutionError(LocalizationError):
    """A "$L." argument could not be resolved.

    Attributes:
        chain: Keys visited while following the reference, in order
    """

    def __init__(self, message: str, chain: tuple[str, ...]) -> None:
        """Initialize SubstitutionError.

        Args:
            message: Human-readable error description
            chain: Keys visited while following the reference
        """
        super().__init__(message)
        self.chain = chain


class SubstitutionCycleError(SubstitutionError):
    """A "$L." reference chain leads back to a key already visited.

    Example:
        greeting = $L.salutation
        salutation = $L.greeting
    """

    def __init__(self, chain: tuple[str, ...]) -> None:
        """Initialize SubstitutionCycleError.

        Args:
            chain: Keys visited, ending with the repeated key
        """
        super().__init__(f"Cyclic localization reference: {' -> '.join(chain)}", chain)


class SubstitutionDepthError(SubstitutionError):
    """A "$L." reference chain is longer than the configured maximum.

    Attributes:
        max_depth: The configured maximum substitution depth
    """

    def __init__(self, chain: tuple[str, ...], max_depth: int) -> None:
        """Initialize SubstitutionDepthError.

        Args:
            chain: Keys visited before the limit was reached
            max_depth: The configured maximum substitution depth
        """
        super().__init__(
            f"Localization reference chain exceeds maximum depth {max_depth}: "
            f"{' -> '.join(chain)}",
            chain,
        )
        self.max_depth = max_depth

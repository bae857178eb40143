"""Configuration value objects.

LocalizationConfig carries every option of the CSV localization pipeline.
It is immutable once constructed and validated eagerly (fail-fast), so a
running process can never observe a half-valid configuration.

FileSystemResourceConfig and FtpResourceConfig describe where resource files
come from.

Python 3.13+.
"""

from __future__ import annotations

import codecs
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from enum import StrEnum
from pathlib import Path
from typing import Any

from csvlocalization.constants import (
    DEFAULT_ENCODING,
    DEFAULT_FTP_PORT,
    DEFAULT_FTP_TIMEOUT,
    DEFAULT_KEY_COLUMN,
    DEFAULT_RELOAD_DEBOUNCE,
    DEFAULT_SEPARATOR,
    DEFAULT_SOURCE,
    MAX_SUBSTITUTION_DEPTH,
)
from csvlocalization.enums import CsvReadMethod, MissingFileHandling, MissingKeyHandling
from csvlocalization.locale_utils import canonical_culture, is_known_culture

__all__ = [
    "FileSystemResourceConfig",
    "FtpResourceConfig",
    "LocalizationConfig",
]

logger = logging.getLogger(__name__)

# Option names accepted by LocalizationConfig.from_mapping(), as they appear
# in process configuration files.
_OPTION_ALIASES: dict[str, str] = {
    "defaultCulture": "default_culture",
    "supportedCultures": "supported_cultures",
    "missingKeyHandling": "missing_key_handling",
    "missingFileHandling": "missing_file_handling",
    "readMethod": "read_method",
    "source": "source",
    "separator": "separator",
    "encoding": "encoding",
    "keyColumnName": "key_column_name",
    "reloadOnChange": "reload_on_change",
    "reloadDebounce": "reload_debounce",
    "maxSubstitutionDepth": "max_substitution_depth",
}


def _parse_enum[E: StrEnum](enum_type: type[E], value: object) -> E:
    """Parse an enum option from a member, value or member name.

    Matching ignores case and underscores, so "ReturnKey", "RETURN_KEY" and
    "return_key" all select MissingKeyHandling.RETURN_KEY.

    Raises:
        ValueError: If no member matches
    """
    if isinstance(value, enum_type):
        return value
    if isinstance(value, str):
        wanted = value.replace("_", "").replace("-", "").casefold()
        for member in enum_type:
            if wanted in (
                member.name.replace("_", "").casefold(),
                member.value.replace("_", "").casefold(),
            ):
                return member
    choices = ", ".join(member.name for member in enum_type)
    msg = f"Invalid {enum_type.__name__}: {value!r} (expected one of {choices})"
    raise ValueError(msg)


def _require_culture(culture_code: str, option: str) -> str:
    """Canonicalize a configured culture code, rejecting unknown ones."""
    try:
        canonical = canonical_culture(culture_code)
    except (TypeError, ValueError) as e:
        msg = f"Invalid culture code in {option}: {culture_code!r}"
        raise ValueError(msg) from e
    if not is_known_culture(canonical):
        msg = f"Unknown culture code in {option}: {culture_code!r}"
        raise ValueError(msg)
    return canonical


@dataclass(frozen=True, slots=True)
class LocalizationConfig:
    """Options of the CSV localization pipeline.

    Culture codes are canonicalized at construction ("en_us" becomes "en-US").
    The default culture is always part of the supported set; if it was not
    listed it is appended and a warning is logged.

    Attributes:
        default_culture: Fallback culture when neither the requested culture
            nor its parent has a translation
        supported_cultures: Whitelist of culture codes accepted as table
            columns (single-file mode) or files (one-file-per-culture mode)
        missing_key_handling: Policy for keys without a translation. None
            means unset and behaves like RETURN_KEY (logged as an anomaly)
        missing_file_handling: Policy for a missing resource file
        read_method: CSV layout
        source: Resource name (or glob pattern) of the table in single-file
            mode; directory prefix of the "<culture>.csv" files in
            one-file-per-culture mode ("" is the resource root)
        separator: CSV field delimiter (one character)
        encoding: Text encoding of the CSV streams
        key_column_name: Header of the key column
        reload_on_change: Watch the resource source and reload on change
        reload_debounce: Seconds to wait after a change notification
        max_substitution_depth: Longest "$L." reference chain followed

    Example:
        >>> config = LocalizationConfig(
        ...     default_culture="en-US",
        ...     supported_cultures=("en-US", "fr-FR"),
        ... )
        >>> config.supported_cultures
        ('en-US', 'fr-FR')
    """

    default_culture: str
    supported_cultures: tuple[str, ...]
    missing_key_handling: MissingKeyHandling | None = MissingKeyHandling.RETURN_KEY
    missing_file_handling: MissingFileHandling = MissingFileHandling.THROW_EXCEPTION
    read_method: CsvReadMethod = CsvReadMethod.SINGLE_FILE_ALL_CULTURES
    source: str = DEFAULT_SOURCE
    separator: str = DEFAULT_SEPARATOR
    encoding: str = DEFAULT_ENCODING
    key_column_name: str = DEFAULT_KEY_COLUMN
    reload_on_change: bool = False
    reload_debounce: float = DEFAULT_RELOAD_DEBOUNCE
    max_substitution_depth: int = MAX_SUBSTITUTION_DEPTH

    def __post_init__(self) -> None:
        """Validate and canonicalize all options.

        Raises:
            ValueError: If any option is invalid
        """
        default = _require_culture(self.default_culture, "default_culture")
        object.__setattr__(self, "default_culture", default)

        if isinstance(self.supported_cultures, str):
            msg = "supported_cultures must be a collection of culture codes, not a string"
            raise ValueError(msg)
        cultures: dict[str, str] = {}
        for code in self.supported_cultures:
            canonical = _require_culture(code, "supported_cultures")
            cultures.setdefault(canonical.casefold(), canonical)
        if not cultures:
            msg = "At least one supported culture is required"
            raise ValueError(msg)
        if default.casefold() not in cultures:
            logger.warning(
                "Default culture '%s' is not in supported cultures; adding it", default
            )
            cultures[default.casefold()] = default
        object.__setattr__(self, "supported_cultures", tuple(cultures.values()))

        if self.missing_key_handling is not None:
            object.__setattr__(
                self,
                "missing_key_handling",
                _parse_enum(MissingKeyHandling, self.missing_key_handling),
            )
        object.__setattr__(
            self,
            "missing_file_handling",
            _parse_enum(MissingFileHandling, self.missing_file_handling),
        )
        object.__setattr__(self, "read_method", _parse_enum(CsvReadMethod, self.read_method))

        if not isinstance(self.separator, str) or len(self.separator) != 1:
            msg = f"separator must be a single character, got {self.separator!r}"
            raise ValueError(msg)
        if self.separator in ('"', "\r", "\n"):
            msg = f"separator cannot be {self.separator!r}"
            raise ValueError(msg)

        try:
            codecs.lookup(self.encoding)
        except (LookupError, TypeError) as e:
            msg = f"Unknown encoding: {self.encoding!r}"
            raise ValueError(msg) from e

        key_column = self.key_column_name.strip() if isinstance(self.key_column_name, str) else ""
        if not key_column:
            msg = "key_column_name cannot be blank"
            raise ValueError(msg)
        object.__setattr__(self, "key_column_name", key_column)

        if not isinstance(self.source, str):
            msg = f"source must be a string, got {type(self.source).__name__}"
            raise ValueError(msg)
        source = self.source.strip().replace("\\", "/")
        if self.read_method is CsvReadMethod.ONE_FILE_PER_CULTURE:
            # The default names a file; per-culture files live under a directory.
            source = "" if source == DEFAULT_SOURCE else source.strip("/")
        object.__setattr__(self, "source", source)

        if self.reload_debounce < 0:
            msg = f"reload_debounce must be non-negative, got {self.reload_debounce}"
            raise ValueError(msg)
        if self.max_substitution_depth < 0:
            msg = (
                "max_substitution_depth must be non-negative, "
                f"got {self.max_substitution_depth}"
            )
            raise ValueError(msg)

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> LocalizationConfig:
        """Build a configuration from process configuration options.

        Accepts the camelCase option names (``defaultCulture``,
        ``supportedCultures``, ``missingKeyHandling``, ``missingFileHandling``,
        ``readMethod``, ``separator``, ``encoding``, ``reloadOnChange``,
        ``keyColumnName``, ``source``, ``reloadDebounce``,
        ``maxSubstitutionDepth``) as well as the snake_case field names.

        Args:
            options: Option name to value mapping (e.g., parsed JSON or TOML)

        Returns:
            Validated LocalizationConfig

        Raises:
            ValueError: If an option is unknown, given twice, or invalid

        Example:
            >>> config = LocalizationConfig.from_mapping({
            ...     "defaultCulture": "en-US",
            ...     "supportedCultures": ["en-US", "fr-FR"],
            ...     "missingKeyHandling": "ReturnKey",
            ... })
        """
        field_names = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for name, value in options.items():
            field_name = _OPTION_ALIASES.get(name, name)
            if field_name not in field_names:
                msg = f"Unknown localization option: {name!r}"
                raise ValueError(msg)
            if field_name in kwargs:
                msg = f"Localization option given twice: {name!r}"
                raise ValueError(msg)
            kwargs[field_name] = value

        if "supported_cultures" in kwargs:
            cultures = kwargs["supported_cultures"]
            if isinstance(cultures, str):
                cultures = [part for part in cultures.split(",") if part.strip()]
            kwargs["supported_cultures"] = tuple(cultures)
        return cls(**kwargs)

    def match_supported(self, culture_code: str) -> str | None:
        """Return the configured spelling of a supported culture, or None.

        Comparison is case-insensitive and separator-insensitive.

        Example:
            >>> config.match_supported("fr_fr")
            'fr-FR'
        """
        wanted = culture_code.replace("_", "-").casefold()
        for culture in self.supported_cultures:
            if culture.casefold() == wanted:
                return culture
        return None

    def is_supported(self, culture_code: str) -> bool:
        """Check whether a culture code is in the supported set."""
        return self.match_supported(culture_code) is not None


@dataclass(frozen=True, slots=True)
class FileSystemResourceConfig:
    """Local directory holding the resource files.

    Attributes:
        root: Directory enumerated recursively; resource names are paths
            relative to it, with "/" separators
        missing_file_handling: Policy for ResourceFileManager.get_file()
        reload_on_change: Watch the directory and re-enumerate on change
    """

    root: str | Path
    missing_file_handling: MissingFileHandling = MissingFileHandling.THROW_EXCEPTION
    reload_on_change: bool = True

    def __post_init__(self) -> None:
        """Normalize root and validate the policy."""
        object.__setattr__(self, "root", Path(self.root))
        object.__setattr__(
            self,
            "missing_file_handling",
            _parse_enum(MissingFileHandling, self.missing_file_handling),
        )

    @property
    def source(self) -> str:
        """Source string passed to the provider."""
        return str(self.root)


@dataclass(frozen=True, slots=True)
class FtpResourceConfig:
    """FTP server holding the resource files.

    Attributes:
        host: FTP host name
        username: Login user name
        password: Login password (hidden from repr)
        port: FTP control port
        root: Directory on the server enumerated recursively; resource names
            are paths relative to it
        missing_file_handling: Policy for ResourceFileManager.get_file()
        use_tls: Use explicit FTPS (AUTH TLS) and a protected data channel
        timeout: Socket timeout in seconds for every connection
    """

    host: str
    username: str = "anonymous"
    password: str = field(default="", repr=False)
    port: int = DEFAULT_FTP_PORT
    root: str = "/"
    missing_file_handling: MissingFileHandling = MissingFileHandling.THROW_EXCEPTION
    use_tls: bool = False
    timeout: float = DEFAULT_FTP_TIMEOUT

    def __post_init__(self) -> None:
        """Validate connection settings.

        Raises:
            ValueError: If host is blank, port out of range or timeout not positive
        """
        if not self.host or not self.host.strip():
            msg = "FTP host cannot be blank"
            raise ValueError(msg)
        if not 0 < self.port < 65536:
            msg = f"FTP port out of range: {self.port}"
            raise ValueError(msg)
        if self.timeout <= 0:
            msg = f"FTP timeout must be positive, got {self.timeout}"
            raise ValueError(msg)
        root = "/" + self.root.replace("\\", "/").strip("/")
        object.__setattr__(self, "root", root)
        object.__setattr__(
            self,
            "missing_file_handling",
            _parse_enum(MissingFileHandling, self.missing_file_handling),
        )

    @property
    def source(self) -> str:
        """Source string passed to the provider."""
        return self.root

"""Culture code utilities backed by Babel.

Culture codes travel through the library in BCP-47 form with hyphens
("en-US", "zh-Hant-TW"). Babel works with POSIX identifiers ("en_US"), so
codes are normalized at the Babel boundary only.

Canonical form: language lower-case, script title-case, territory upper-case,
for example "EN-us" becomes "en-US". Canonicalization is purely syntactic;
is_known_culture() additionally checks that CLDR has data for the code.

Python 3.13+.
"""

from __future__ import annotations

import functools

from babel import Locale, UnknownLocaleError
from babel.core import get_locale_identifier, parse_locale

from csvlocalization.constants import MAX_LOCALE_CACHE_SIZE

__all__ = [
    "canonical_culture",
    "get_babel_locale",
    "is_known_culture",
    "normalize_locale",
    "parent_culture",
    "to_culture_code",
]


def normalize_locale(culture_code: str) -> str:
    """Convert a BCP-47 culture code to POSIX format for Babel.

    Args:
        culture_code: BCP-47 culture code (e.g., "en-US", "pt-BR")

    Returns:
        POSIX-formatted locale identifier (e.g., "en_US", "pt_BR")

    Example:
        >>> normalize_locale("en-US")
        'en_US'
        >>> normalize_locale("en")
        'en'
    """
    return culture_code.replace("-", "_")


def to_culture_code(locale_identifier: str) -> str:
    """Convert a POSIX locale identifier back to a BCP-47 culture code.

    Example:
        >>> to_culture_code("zh_Hant_TW")
        'zh-Hant-TW'
    """
    return locale_identifier.replace("_", "-")


def _parse_parts(culture_code: str) -> tuple[str, str | None, str | None, str | None]:
    """Split a culture code into (language, territory, script, variant).

    Raises:
        ValueError: If the code is not syntactically a culture code
    """
    if not isinstance(culture_code, str):
        msg = f"Culture code must be a string, got {type(culture_code).__name__}"
        raise TypeError(msg)
    stripped = culture_code.strip()
    if not stripped:
        msg = "Culture code cannot be empty"
        raise ValueError(msg)
    # Modifiers ("@euro") are not part of the culture vocabulary.
    if "@" in stripped:
        msg = f"Culture code must not carry a modifier: {culture_code!r}"
        raise ValueError(msg)
    parts = parse_locale(normalize_locale(stripped))
    language, territory, script, variant = parts[:4]
    return language, territory, script, variant


@functools.lru_cache(maxsize=MAX_LOCALE_CACHE_SIZE)
def canonical_culture(culture_code: str) -> str:
    """Return the canonical BCP-47 spelling of a culture code.

    Thread-safe via lru_cache internal locking.

    Args:
        culture_code: Culture code in any case, hyphen or underscore separated

    Returns:
        Canonical culture code

    Raises:
        ValueError: If the code is not syntactically a culture code
        TypeError: If the code is not a string

    Example:
        >>> canonical_culture("EN_us")
        'en-US'
    """
    language, territory, script, variant = _parse_parts(culture_code)
    return to_culture_code(get_locale_identifier((language, territory, script, variant)))


@functools.lru_cache(maxsize=MAX_LOCALE_CACHE_SIZE)
def get_babel_locale(culture_code: str) -> Locale:
    """Get a Babel Locale object with caching.

    Args:
        culture_code: Culture code (BCP-47 or POSIX format accepted)

    Returns:
        Babel Locale object

    Raises:
        babel.UnknownLocaleError: If CLDR has no data for the code
        ValueError: If the code format is invalid
    """
    return Locale.parse(normalize_locale(canonical_culture(culture_code)))


def is_known_culture(culture_code: str) -> bool:
    """Check that a culture code is well formed and known to CLDR.

    Example:
        >>> is_known_culture("fr-FR")
        True
        >>> is_known_culture("xx-QQ")
        False
    """
    try:
        get_babel_locale(culture_code)
    except (ValueError, TypeError, UnknownLocaleError):
        return False
    return True


@functools.lru_cache(maxsize=MAX_LOCALE_CACHE_SIZE)
def parent_culture(culture_code: str) -> str | None:
    """Return the parent culture code, or None for a neutral culture.

    The parent drops the most specific subtag: the variant, then the
    territory, then the script. A bare language has the invariant culture as
    its parent, which is never used as a fallback, so None is returned.

    Args:
        culture_code: Culture code

    Returns:
        Parent culture code, or None when the parent is the invariant culture

    Raises:
        ValueError: If the code is not syntactically a culture code

    Example:
        >>> parent_culture("en-GB")
        'en'
        >>> parent_culture("zh-Hant-TW")
        'zh-Hant'
        >>> parent_culture("en") is None
        True
    """
    language, territory, script, variant = _parse_parts(culture_code)
    if variant:
        variant = None
    elif territory:
        territory = None
    elif script:
        script = None
    else:
        return None
    return to_culture_code(get_locale_identifier((language, territory, script, variant)))

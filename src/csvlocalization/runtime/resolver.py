"""String resolution over the live localization table.

ResolutionEngine.get_string() is the hot path of the library:

1. Take one snapshot of the table from the LocalizationStore. Every step
   below works on that snapshot, so a concurrent reload cannot mix old and
   new data into one result.
2. Walk the fallback chain: requested culture, its parent (never the
   invariant culture), then the default culture.
3. Apply the missing-key policy when the chain is exhausted.
4. Replace "$L.<key>" arguments with the translation of <key>. Reference
   chains are followed until a plain value is reached, bounded by
   max_substitution_depth and guarded against cycles.
5. Format positional placeholders when arguments were given. A mismatch is
   logged and the unformatted template returned.

Python 3.13+.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from csvlocalization.constants import LOCALIZATION_ARG_PREFIX
from csvlocalization.enums import MissingKeyHandling
from csvlocalization.errors import (
    FormatMismatchError,
    MissingLocalizationKeyError,
    SubstitutionCycleError,
    SubstitutionDepthError,
    SubstitutionError,
)
from csvlocalization.locale_utils import canonical_culture, parent_culture
from csvlocalization.runtime.culture_context import current_culture
from csvlocalization.runtime.formatting import format_positional

if TYPE_CHECKING:
    from csvlocalization.config import LocalizationConfig
    from csvlocalization.localization.table import LocalizationTable
    from csvlocalization.localization.types import CultureCode, LocalizationKey
    from csvlocalization.runtime.store import LocalizationStore

__all__ = ["ResolutionEngine"]

logger = logging.getLogger(__name__)


def _key_name(key: LocalizationKey | Enum) -> LocalizationKey:
    if isinstance(key, Enum):
        return key.name
    if not isinstance(key, str):
        msg = f"Localization key must be a string or Enum, got {type(key).__name__}"
        raise TypeError(msg)
    return key


class ResolutionEngine:
    """Resolves localization keys to display strings.

    Thread-safe: holds no mutable state of its own; all data comes from the
    store snapshot taken at the start of each call.

    Example:
        >>> engine = ResolutionEngine(store, config)
        >>> engine.get_string("greeting", culture="fr-FR")
        'Bonjour'
        >>> engine.get_string("welcome", "$L.user", culture="en-US")
        'Welcome, guest'
    """

    __slots__ = ("_config", "_store")

    def __init__(self, store: LocalizationStore, config: LocalizationConfig) -> None:
        self._store = store
        self._config = config

    @property
    def config(self) -> LocalizationConfig:
        return self._config

    def get_string(
        self,
        key: LocalizationKey | Enum,
        *args: object,
        culture: CultureCode | None = None,
    ) -> str:
        """Resolve a key for a culture and format it with positional args.

        Args:
            key: Localization key; an Enum member resolves by its name
            *args: Positional format arguments. A string argument of the form
                "$L.<key>" is replaced by the translation of <key>
            culture: Culture code; defaults to the ambient culture set with
                use_culture(), then the configured default culture

        Returns:
            The resolved, formatted string, or the missing-key policy's value

        Raises:
            MissingLocalizationKeyError: Key not found and the policy is
                THROW_EXCEPTION (also for a "$L." argument's key)
            TypeError: If key is neither a string nor an Enum
            ValueError: If culture is not a syntactically valid culture code
        """
        name = _key_name(key)
        culture_code = self._effective_culture(culture)
        table = self._store.get()

        template = self._lookup(table, name, culture_code)
        if template is None:
            return self._handle_missing(name, culture_code)
        if not args:
            return template

        resolved = [self._substitute(table, arg, culture_code) for arg in args]
        try:
            return format_positional(template, resolved)
        except FormatMismatchError as e:
            logger.error("Failed to format localization key '%s': %s", name, e)
            return template

    def has_key(
        self, key: LocalizationKey | Enum, culture: CultureCode | None = None
    ) -> bool:
        """Check whether a key resolves without the missing-key policy.

        With culture omitted, checks only that the key exists in the table.
        """
        name = _key_name(key)
        table = self._store.get()
        if culture is None:
            return name in table
        return self._lookup(table, name, canonical_culture(culture)) is not None

    def _effective_culture(self, culture: CultureCode | None) -> CultureCode:
        if culture is None:
            culture = current_culture()
        if culture is None:
            return self._config.default_culture
        return canonical_culture(culture)

    def _lookup(
        self, table: LocalizationTable, key: LocalizationKey, culture: CultureCode
    ) -> str | None:
        """Walk the fallback chain. Returns None when every step misses."""
        translations = table.get(key)
        if translations is None:
            return None
        value = translations.get(culture)
        if value is not None:
            return value
        parent = parent_culture(culture)
        if parent is not None:
            value = translations.get(parent)
            if value is not None:
                return value
        return translations.get(self._config.default_culture)

    def _handle_missing(self, key: LocalizationKey, culture: CultureCode) -> str:
        match self._config.missing_key_handling:
            case MissingKeyHandling.RETURN_EMPTY_STRING:
                logger.warning(
                    "Localization key '%s' not found for culture '%s'", key, culture
                )
                return ""
            case MissingKeyHandling.RETURN_KEY:
                logger.warning(
                    "Localization key '%s' not found for culture '%s'", key, culture
                )
                return key
            case MissingKeyHandling.THROW_EXCEPTION:
                logger.error(
                    "Localization key '%s' not found for culture '%s'", key, culture
                )
                raise MissingLocalizationKeyError(key, culture)
            case policy:
                logger.error(
                    "Unknown missing key handling %r; returning key '%s'", policy, key
                )
                return key

    def _substitute(
        self, table: LocalizationTable, arg: object, culture: CultureCode
    ) -> object:
        """Resolve a "$L." argument; other arguments pass through unchanged."""
        if not isinstance(arg, str) or not arg.startswith(LOCALIZATION_ARG_PREFIX):
            return arg
        try:
            return self._follow_reference(table, arg, culture)
        except SubstitutionError as e:
            logger.error("Cannot substitute argument '%s': %s", arg, e)
            return arg

    def _follow_reference(
        self, table: LocalizationTable, reference: str, culture: CultureCode
    ) -> str:
        """Follow a "$L." chain to the first value that is not a reference.

        Raises:
            SubstitutionCycleError: If the chain revisits a key
            SubstitutionDepthError: If the chain is longer than the maximum
        """
        max_depth = self._config.max_substitution_depth
        chain: list[str] = []
        seen: set[str] = set()
        value = reference
        while value.startswith(LOCALIZATION_ARG_PREFIX):
            key = value[len(LOCALIZATION_ARG_PREFIX) :]
            chain.append(key)
            if key.casefold() in seen:
                raise SubstitutionCycleError(tuple(chain))
            if len(chain) > max_depth:
                raise SubstitutionDepthError(tuple(chain), max_depth)
            seen.add(key.casefold())
            found = self._lookup(table, key, culture)
            value = found if found is not None else self._handle_missing(key, culture)
        return value

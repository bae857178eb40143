"""Immutable localization table.

LocalizationTable maps a localization key to the translations of that key,
which in turn map a culture code to the translated string. Both levels are
case-insensitive and neither can be mutated after construction: a reload
builds a new table and swaps it in wholesale.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import overload

from csvlocalization.localization.types import CultureCode, LocalizationKey

__all__ = ["CaseInsensitiveMapping", "LocalizationTable", "Translations"]


class CaseInsensitiveMapping[V](Mapping[str, V]):
    """Read-only mapping with case-insensitive string keys.

    Keys keep the spelling they were first given; lookups compare casefolded
    keys. When the same key is given twice in different case, the first
    occurrence wins.

    Example:
        >>> values = CaseInsensitiveMapping({"en-US": "Hello"})
        >>> values["EN-us"]
        'Hello'
        >>> list(values)
        ['en-US']
    """

    __slots__ = ("_data",)

    def __init__(self, items: Mapping[str, V] | Iterable[tuple[str, V]] = ()) -> None:
        """Initialize from a mapping or an iterable of (key, value) pairs."""
        pairs = items.items() if isinstance(items, Mapping) else items
        data: dict[str, tuple[str, V]] = {}
        for key, value in pairs:
            data.setdefault(key.casefold(), (key, value))
        self._data = data

    def __getitem__(self, key: str) -> V:
        if not isinstance(key, str):
            raise KeyError(key)
        return self._data[key.casefold()][1]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.casefold() in self._data

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._data.values())

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {v!r}" for k, v in self._data.values())
        return f"{type(self).__name__}({{{items}}})"


class Translations(CaseInsensitiveMapping[str]):
    """Culture code to translated string, for one localization key."""

    __slots__ = ()


class LocalizationTable(CaseInsensitiveMapping[Translations]):
    """Localization key to Translations.

    Equality compares keys, culture codes and values, so re-ingesting an
    unchanged source yields an equal table.

    Example:
        >>> table = LocalizationTable.from_dict({"greeting": {"en-US": "Hello"}})
        >>> table["GREETING"]["en-us"]
        'Hello'
        >>> table.entry_count
        1
    """

    __slots__ = ()

    @classmethod
    def from_dict(
        cls, data: Mapping[LocalizationKey, Mapping[CultureCode, str]]
    ) -> LocalizationTable:
        """Build a table from a nested plain mapping.

        Keys without any translation are dropped.
        """
        return cls(
            (key, Translations(values)) for key, values in data.items() if values
        )

    @classmethod
    def empty(cls) -> LocalizationTable:
        """Return a table without any key."""
        return cls()

    @overload
    def translate(self, key: LocalizationKey, culture: CultureCode) -> str | None: ...

    @overload
    def translate(
        self, key: LocalizationKey, culture: CultureCode, default: str
    ) -> str: ...

    def translate(
        self, key: LocalizationKey, culture: CultureCode, default: str | None = None
    ) -> str | None:
        """Return the exact translation of key for culture, without fallback."""
        translations = self.get(key)
        if translations is None:
            return default
        return translations.get(culture, default)

    @property
    def cultures(self) -> frozenset[CultureCode]:
        """Culture codes that carry at least one translation."""
        return frozenset(
            culture for translations in self.values() for culture in translations
        )

    @property
    def entry_count(self) -> int:
        """Total number of (key, culture) pairs."""
        return sum(len(translations) for translations in self.values())

    def to_dict(self) -> dict[LocalizationKey, dict[CultureCode, str]]:
        """Return a plain nested dict copy (for serialization and debugging)."""
        return {key: dict(translations) for key, translations in self.items()}

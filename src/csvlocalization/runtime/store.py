"""Holder of the live localization table.

LocalizationStore publishes one immutable LocalizationTable at a time.
Readers always observe either the previous table or the new one in full:
the swap replaces a single reference under the exclusive side of an RWLock,
and tables are never mutated after construction.

Python 3.13+.
"""

from __future__ import annotations

import logging

from csvlocalization.localization.table import LocalizationTable
from csvlocalization.runtime.rwlock import RWLock

__all__ = ["LocalizationStore"]

logger = logging.getLogger(__name__)


class LocalizationStore:
    """Thread-safe holder of the current LocalizationTable.

    Example:
        >>> store = LocalizationStore()
        >>> store.replace(LocalizationTable.from_dict({"hi": {"en": "Hi"}}))
        >>> store.get().translate("hi", "en")
        'Hi'
        >>> store.version
        1
    """

    __slots__ = ("_lock", "_table", "_version")

    def __init__(self, table: LocalizationTable | None = None) -> None:
        """Initialize the store.

        Args:
            table: Initial table; an empty table when omitted
        """
        self._lock = RWLock()
        self._table = table if table is not None else LocalizationTable.empty()
        self._version = 0

    def get(self) -> LocalizationTable:
        """Return the current table.

        The returned table stays valid (and unchanged) after a later swap, so
        a caller can use one snapshot for a whole multi-step lookup.
        """
        with self._lock.read():
            return self._table

    def replace(self, table: LocalizationTable, *, allow_empty: bool = False) -> None:
        """Atomically publish a new table.

        Args:
            table: The new table
            allow_empty: Accept a table without any key

        Raises:
            TypeError: If table is not a LocalizationTable
            ValueError: If table is empty and allow_empty is False
        """
        if not isinstance(table, LocalizationTable):
            msg = f"Expected LocalizationTable, got {type(table).__name__}"
            raise TypeError(msg)
        if not table and not allow_empty:
            msg = "Refusing to replace localization data with an empty table"
            raise ValueError(msg)
        with self._lock.write():
            self._table = table
            self._version += 1
            version = self._version
        logger.info(
            "Localization data updated (version %d, %d keys, %d entries)",
            version,
            len(table),
            table.entry_count,
        )

    @property
    def version(self) -> int:
        """Number of successful replacements so far."""
        with self._lock.read():
            return self._version

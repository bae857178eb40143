"""CSV ingestion: resource snapshot to LocalizationTable.

Two layouts are supported:

SINGLE_FILE_ALL_CULTURES
    One table (or several, when ``source`` is a glob pattern) whose header
    is the key column followed by one column per culture code::

        key,en-US,fr-FR
        greeting,Hello,Bonjour

    Columns whose header is not a valid culture code, or names a culture
    outside the supported set, are dropped. Duplicate headers abort the pass.

ONE_FILE_PER_CULTURE
    One "<culture>.csv" file per supported culture under the ``source``
    directory, holding the key column and one value column. A missing file
    or a file without a key column is skipped with a warning.

In both layouts keys and values are trimmed, rows without a key are
skipped, empty cells mean "no translation", and the first value seen for a
(key, culture) pair wins. Files are read in case-insensitive name order, so
the result does not depend on how the transport enumerated them.

Structural problems raise IngestionError and no table is produced.

Python 3.13+.
"""

from __future__ import annotations

import codecs
import csv
import io
import logging
from collections.abc import Generator, Iterator
from contextlib import contextmanager
from typing import IO, TYPE_CHECKING

from csvlocalization.constants import CSV_EXTENSION
from csvlocalization.enums import CsvReadMethod, MissingFileHandling
from csvlocalization.errors import IngestionError, MissingResourceFileError
from csvlocalization.localization.table import LocalizationTable, Translations
from csvlocalization.locale_utils import canonical_culture, is_known_culture

if TYPE_CHECKING:
    from csvlocalization.config import LocalizationConfig
    from csvlocalization.localization.types import CultureCode, LocalizationKey
    from csvlocalization.resources.types import ResourceFile, ResourceSnapshot

__all__ = ["CsvIngestionPipeline"]

logger = logging.getLogger(__name__)

_BOM = codecs.BOM_UTF8.decode()


class _TableBuilder:
    """Accumulates (key, culture, value) triples; the first write wins."""

    __slots__ = ("_keys", "_values")

    def __init__(self) -> None:
        # casefolded key -> (original key, casefolded culture -> (culture, value))
        self._keys: dict[str, str] = {}
        self._values: dict[str, dict[str, tuple[str, str]]] = {}

    def add(
        self,
        key: LocalizationKey,
        culture: CultureCode,
        value: str,
        *,
        source: str,
        row: int,
    ) -> None:
        folded = key.casefold()
        self._keys.setdefault(folded, key)
        cultures = self._values.setdefault(folded, {})
        existing = cultures.get(culture.casefold())
        if existing is not None:
            logger.warning(
                "Duplicate key '%s' for culture '%s' in '%s' row %d; keeping first value",
                key,
                culture,
                source,
                row,
            )
            return
        cultures[culture.casefold()] = (culture, value)

    def build(self) -> LocalizationTable:
        return LocalizationTable(
            (self._keys[folded], Translations(cultures.values()))
            for folded, cultures in self._values.items()
            if cultures
        )


class CsvIngestionPipeline:
    """Parses the CSV resources of a snapshot into a LocalizationTable.

    Stateless apart from its configuration; one instance can ingest any
    number of snapshots, from any thread.

    Example:
        >>> pipeline = CsvIngestionPipeline(config)
        >>> table = pipeline.ingest(manager.get_files())
        >>> table["greeting"]["fr-FR"]
        'Bonjour'
    """

    __slots__ = ("_config",)

    def __init__(self, config: LocalizationConfig) -> None:
        self._config = config

    @property
    def config(self) -> LocalizationConfig:
        return self._config

    def ingest(self, snapshot: ResourceSnapshot) -> LocalizationTable:
        """Build a fresh table from the snapshot.

        Raises:
            IngestionError: If a resource is structurally invalid
            MissingResourceFileError: If the single-file source is absent and
                missing files are not ignored
            ResourceAccessError: If a resource cannot be read
        """
        builder = _TableBuilder()
        if self._config.read_method is CsvReadMethod.ONE_FILE_PER_CULTURE:
            self._ingest_per_culture(snapshot, builder)
        else:
            self._ingest_single(snapshot, builder)
        table = builder.build()
        logger.info(
            "Ingested %d key(s), %d translation(s) from '%s'",
            len(table),
            table.entry_count,
            snapshot.source,
        )
        return table

    def _ingest_single(self, snapshot: ResourceSnapshot, builder: _TableBuilder) -> None:
        source = self._config.source
        files = snapshot.match(source)
        if not files:
            if self._config.missing_file_handling is MissingFileHandling.IGNORE:
                logger.warning("Localization CSV '%s' not found; no data loaded", source)
                return
            raise MissingResourceFileError(source)

        for resource in files:
            with self._rows(resource) as (reader, header):
                key_index = self._key_index(header, resource)
                columns = self._culture_columns(header, key_index, resource)
                if not columns:
                    msg = f"No supported culture column in '{resource.name}'"
                    raise IngestionError(msg, source=resource.name)
                self._read_rows(reader, key_index, columns, resource, builder)

    def _ingest_per_culture(self, snapshot: ResourceSnapshot, builder: _TableBuilder) -> None:
        directory = self._config.source
        for culture in self._config.supported_cultures:
            name = f"{culture}{CSV_EXTENSION}"
            if directory:
                name = f"{directory}/{name}"
            resource = snapshot.get(name)
            if resource is None:
                logger.warning("Localization CSV for culture '%s' not found: '%s'", culture, name)
                continue
            with self._rows(resource) as (reader, header):
                key_index = self._find_key_column(header)
                if key_index is None:
                    logger.warning(
                        "Skipping '%s': no '%s' column", resource.name, self._config.key_column_name
                    )
                    continue
                value_indices = [
                    i for i, cell in enumerate(header) if i != key_index and cell
                ]
                if not value_indices:
                    logger.warning("Skipping '%s': no value column", resource.name)
                    continue
                if len(value_indices) > 1:
                    logger.warning(
                        "'%s' has %d value columns; using '%s'",
                        resource.name,
                        len(value_indices),
                        header[value_indices[0]],
                    )
                self._read_rows(reader, key_index, [(value_indices[0], culture)], resource, builder)

    @contextmanager
    def _rows(
        self, resource: ResourceFile
    ) -> Generator[tuple[Iterator[tuple[int, list[str]]], list[str]]]:
        """Open a resource and yield (numbered row iterator, trimmed header)."""
        logger.debug("Parsing localization CSV '%s'", resource.uri)
        config = self._config
        with io.TextIOWrapper(resource.open(), encoding=config.encoding, newline="") as stream:
            reader = _numbered_rows(stream, config.separator, resource)
            first = next(reader, None)
            if first is None:
                msg = f"'{resource.name}' has no header row"
                raise IngestionError(msg, source=resource.name)
            header = [cell.strip() for cell in first[1]]
            if header:
                header[0] = header[0].removeprefix(_BOM).strip()
            _check_duplicate_headers(header, resource)
            yield reader, header

    def _find_key_column(self, header: list[str]) -> int | None:
        wanted = self._config.key_column_name.casefold()
        for index, name in enumerate(header):
            if name.casefold() == wanted:
                return index
        return None

    def _key_index(self, header: list[str], resource: ResourceFile) -> int:
        index = self._find_key_column(header)
        if index is None:
            msg = f"'{resource.name}' has no '{self._config.key_column_name}' column"
            raise IngestionError(msg, source=resource.name)
        return index

    def _culture_columns(
        self, header: list[str], key_index: int, resource: ResourceFile
    ) -> list[tuple[int, CultureCode]]:
        columns: list[tuple[int, CultureCode]] = []
        for index, name in enumerate(header):
            if index == key_index or not name:
                continue
            try:
                culture = canonical_culture(name)
            except ValueError:
                culture = ""
            if not culture or not is_known_culture(culture):
                logger.warning(
                    "Invalid culture code '%s' in header of '%s'; column skipped",
                    name,
                    resource.name,
                )
                continue
            supported = self._config.match_supported(culture)
            if supported is None:
                logger.info(
                    "Culture '%s' in '%s' is not supported; column skipped", name, resource.name
                )
                continue
            columns.append((index, supported))
        return columns

    @staticmethod
    def _read_rows(
        reader: Iterator[tuple[int, list[str]]],
        key_index: int,
        columns: list[tuple[int, CultureCode]],
        resource: ResourceFile,
        builder: _TableBuilder,
    ) -> None:
        for row_number, row in reader:
            if not row or not any(cell.strip() for cell in row):
                continue
            key = row[key_index].strip() if key_index < len(row) else ""
            if not key:
                logger.warning("Skipping row %d of '%s': no key", row_number, resource.name)
                continue
            for index, culture in columns:
                value = row[index].strip() if index < len(row) else ""
                if value:
                    builder.add(key, culture, value, source=resource.name, row=row_number)


def _numbered_rows(
    stream: IO[str], delimiter: str, resource: ResourceFile
) -> Iterator[tuple[int, list[str]]]:
    """Yield (line the record starts on, row) pairs.

    Quoted cells may span lines, so the line number comes from the reader
    rather than from counting records. Decoding and CSV syntax errors are
    re-raised as IngestionError.
    """
    reader = csv.reader(stream, delimiter=delimiter)
    line = 1
    try:
        for row in reader:
            yield line, row
            line = reader.line_num + 1
    except UnicodeDecodeError as e:
        msg = f"'{resource.name}' is not valid text in the configured encoding: {e}"
        raise IngestionError(msg, source=resource.name) from e
    except csv.Error as e:
        msg = f"'{resource.name}' is not valid CSV: {e}"
        raise IngestionError(msg, source=resource.name) from e


def _check_duplicate_headers(header: list[str], resource: ResourceFile) -> None:
    seen: set[str] = set()
    for cell in header:
        if not cell:
            continue
        folded = cell.casefold()
        if folded in seen:
            msg = f"'{resource.name}' has duplicate header '{cell}'"
            raise IngestionError(msg, source=resource.name)
        seen.add(folded)

"""Resource transport abstractions.

A transport is a pair of capabilities: a ResourceFileProvider that
enumerates a source into an immutable ResourceSnapshot, and an optional
ResourceFileWatcher that reports changes to that source. Ingestion and
resolution only ever see ResourceFile and ResourceSnapshot, never the
transport behind them.

Components:
    ResourceFile - One readable unit of content (abstract base class)
    ResourceSnapshot - Immutable set of files from one provider invocation
    WatchEvent - Change notification emitted by a watcher
    ResourceFileProvider - Protocol for enumerating a source
    ResourceFileWatcher - Protocol for observing a source

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import fnmatch
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from types import MappingProxyType
from typing import IO, TYPE_CHECKING, Protocol

from csvlocalization.constants import DEFAULT_ENCODING
from csvlocalization.enums import WatchEventKind

if TYPE_CHECKING:
    from csvlocalization.localization.types import ResourceName

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Data types
    "ResourceFile",
    "ResourceSnapshot",
    "WatchEvent",
    # Capabilities
    "ResourceFileProvider",
    "ResourceFileWatcher",
    "WatchCallback",
]


class ResourceFile(ABC):
    """One readable resource, identified by its URI and its name.

    The name is the path relative to the provider's root, with "/"
    separators; lookups by name are case-insensitive. Content is fetched on
    every open() and never cached by the file object.

    Subclasses implement open(); the read_* helpers are built on it.
    """

    __slots__ = ("_name", "_uri")

    def __init__(self, uri: str, name: ResourceName) -> None:
        self._uri = uri
        self._name = name

    @property
    def uri(self) -> str:
        """Absolute location of the resource (path or URL)."""
        return self._uri

    @property
    def name(self) -> ResourceName:
        """Path relative to the provider root ("i18n/fr-FR.csv")."""
        return self._name

    @property
    def extension(self) -> str:
        """File extension including the dot (".csv"), or "" when absent."""
        return PurePosixPath(self._name).suffix

    @property
    def name_without_extension(self) -> str:
        """Base file name without directory and extension ("fr-FR")."""
        return PurePosixPath(self._name).stem

    @abstractmethod
    def open(self) -> IO[bytes]:
        """Open the content as a binary stream. The caller closes it.

        Raises:
            ResourceAccessError: If the content cannot be read
        """

    def read_bytes(self) -> bytes:
        """Return the whole content."""
        with self.open() as stream:
            return stream.read()

    def read_text(self, encoding: str = DEFAULT_ENCODING) -> str:
        """Return the whole content decoded as text."""
        return self.read_bytes().decode(encoding)

    def read_lines(self, encoding: str = DEFAULT_ENCODING) -> list[str]:
        """Return the trimmed, non-empty lines of the content."""
        return [
            stripped
            for line in self.read_text(encoding).splitlines()
            if (stripped := line.strip())
        ]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ResourceFile):
            return NotImplemented
        return type(self) is type(other) and self._uri == other._uri

    def __hash__(self) -> int:
        return hash((type(self), self._uri))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r}, uri={self._uri!r})"


@dataclass(frozen=True, slots=True)
class ResourceSnapshot:
    """Immutable set of resource files produced by one provider invocation.

    Files are unique by URI and ordered by case-insensitive name, so
    iteration order does not depend on how the transport enumerated them.

    Attributes:
        files: The resource files, sorted by name
        source: Source the snapshot was enumerated from
    """

    files: tuple[ResourceFile, ...] = ()
    source: str = ""
    _by_name: MappingProxyType[str, ResourceFile] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        unique: dict[str, ResourceFile] = {}
        for resource in self.files:
            unique.setdefault(resource.uri, resource)
        ordered = tuple(sorted(unique.values(), key=lambda f: (f.name.casefold(), f.name)))
        object.__setattr__(self, "files", ordered)
        by_name: dict[str, ResourceFile] = {}
        for resource in ordered:
            by_name.setdefault(resource.name.casefold(), resource)
        object.__setattr__(self, "_by_name", MappingProxyType(by_name))

    @classmethod
    def from_files(cls, files: Iterable[ResourceFile], source: str = "") -> ResourceSnapshot:
        """Build a snapshot from any iterable of files."""
        return cls(tuple(files), source)

    @classmethod
    def empty(cls, source: str = "") -> ResourceSnapshot:
        """Return a snapshot without files."""
        return cls((), source)

    def get(self, name: ResourceName) -> ResourceFile | None:
        """Return the file with this name (case-insensitive), or None."""
        return self._by_name.get(name.replace("\\", "/").casefold())

    def match(self, pattern: str) -> tuple[ResourceFile, ...]:
        """Return the files whose name matches a glob pattern, case-insensitively.

        Example:
            >>> snapshot.match("*.csv")
        """
        wanted = pattern.replace("\\", "/").casefold()
        return tuple(
            resource
            for resource in self.files
            if fnmatch.fnmatchcase(resource.name.casefold(), wanted)
        )

    def search(self, pattern: str, *, case_sensitive: bool = True) -> tuple[ResourceFile, ...]:
        """Return the files whose name contains a substring."""
        if case_sensitive:
            return tuple(resource for resource in self.files if pattern in resource.name)
        wanted = pattern.casefold()
        return tuple(resource for resource in self.files if wanted in resource.name.casefold())

    @property
    def names(self) -> tuple[ResourceName, ...]:
        return tuple(resource.name for resource in self.files)

    def __len__(self) -> int:
        return len(self.files)

    def __iter__(self) -> Iterator[ResourceFile]:
        return iter(self.files)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None


@dataclass(frozen=True, slots=True)
class WatchEvent:
    """Change notification from a ResourceFileWatcher.

    Attributes:
        kind: CHANGED (created, deleted or modified), RENAMED or ERROR
        path: Affected path; "" when unknown
        dest_path: New path for RENAMED events
        error: The failure for ERROR events
    """

    kind: WatchEventKind
    path: str = ""
    dest_path: str | None = None
    error: BaseException | None = None


type WatchCallback = Callable[[WatchEvent], None]
"""Subscriber invoked on the watcher's own thread for every event."""


class ResourceFileProvider(Protocol):
    """Protocol for enumerating resource files from a source.

    Implementations return a complete snapshot or raise; they never return
    a partially enumerated set.
    """

    def load_files(self, source: str) -> ResourceSnapshot:
        """Enumerate the source recursively.

        Args:
            source: Directory path or FTP root

        Raises:
            ResourceAccessError: If the source cannot be enumerated
        """
        ...


class ResourceFileWatcher(Protocol):
    """Protocol for observing a source and reporting changes."""

    def subscribe(self, callback: WatchCallback) -> None:
        """Register a callback for every subsequent event."""
        ...

    def start(self) -> None:
        """Begin observing. Idempotent."""
        ...

    def stop(self) -> None:
        """Stop observing and release OS resources. Idempotent."""
        ...

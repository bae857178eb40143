"""Resource file manager.

ResourceFileManager owns the current ResourceSnapshot of one source. It
enumerates the source at construction and again whenever its watcher
reports a change or a rename, swapping the snapshot reference in one
assignment. A failed enumeration is logged and keeps the previous snapshot,
which is empty until the first enumeration succeeds.

Python 3.13+.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Self

from csvlocalization.enums import MissingFileHandling, WatchEventKind
from csvlocalization.errors import MissingResourceFileError
from csvlocalization.resources.filesystem import (
    FileSystemResourceProvider,
    FileSystemResourceWatcher,
)
from csvlocalization.resources.ftp import FtpClientFactory, FtpResourceProvider
from csvlocalization.resources.types import ResourceSnapshot

if TYPE_CHECKING:
    from csvlocalization.config import FileSystemResourceConfig, FtpResourceConfig
    from csvlocalization.localization.types import ResourceName
    from csvlocalization.resources.types import (
        ResourceFile,
        ResourceFileProvider,
        ResourceFileWatcher,
        WatchEvent,
    )

__all__ = ["ResourceFileManager"]

logger = logging.getLogger(__name__)


class ResourceFileManager:
    """Holds the current snapshot of a resource source.

    Lookups read a single reference and never block. Refreshes are
    serialized among themselves so two concurrent watcher events cannot
    publish snapshots out of order.

    Args:
        provider: Transport that enumerates the source
        source: Directory path or FTP root passed to the provider
        missing_file_handling: Policy for get_file() on an unknown name
        watcher: Optional change notifier; every CHANGED or RENAMED event
            triggers a refresh

    A failing initial enumeration is logged and leaves the snapshot empty.

    Example:
        >>> manager = ResourceFileManager.for_filesystem(
        ...     FileSystemResourceConfig(root="i18n", reload_on_change=False)
        ... )
        >>> manager.get_file("localization.csv").read_lines()[0]
        'key,en-US,fr-FR'
    """

    __slots__ = (
        "_missing_file_handling",
        "_provider",
        "_refresh_lock",
        "_snapshot",
        "_source",
        "_watcher",
    )

    def __init__(
        self,
        provider: ResourceFileProvider,
        source: str,
        *,
        missing_file_handling: MissingFileHandling = MissingFileHandling.THROW_EXCEPTION,
        watcher: ResourceFileWatcher | None = None,
    ) -> None:
        self._provider = provider
        self._source = source
        self._missing_file_handling = missing_file_handling
        self._refresh_lock = threading.RLock()
        self._snapshot = ResourceSnapshot.empty(source)
        self._watcher = watcher
        self.reload()
        if watcher is not None:
            watcher.subscribe(self._on_watch_event)
            watcher.start()

    @classmethod
    def for_filesystem(cls, config: FileSystemResourceConfig) -> Self:
        """Build a manager over a local directory, watched when configured."""
        watcher = FileSystemResourceWatcher(config.root) if config.reload_on_change else None
        return cls(
            FileSystemResourceProvider(),
            config.source,
            missing_file_handling=config.missing_file_handling,
            watcher=watcher,
        )

    @classmethod
    def for_ftp(
        cls, config: FtpResourceConfig, client_factory: FtpClientFactory | None = None
    ) -> Self:
        """Build a manager over an FTP directory (never watched)."""
        return cls(
            FtpResourceProvider(config, client_factory),
            config.source,
            missing_file_handling=config.missing_file_handling,
        )

    @property
    def source(self) -> str:
        return self._source

    @property
    def watcher(self) -> ResourceFileWatcher | None:
        return self._watcher

    def get_files(self) -> ResourceSnapshot:
        """Return the current snapshot."""
        return self._snapshot

    def get_file(self, name: ResourceName) -> ResourceFile | None:
        """Return a file by name (case-insensitive).

        Returns None for an unknown name under MissingFileHandling.IGNORE.

        Raises:
            MissingResourceFileError: Unknown name under THROW_EXCEPTION
        """
        resource = self._snapshot.get(name)
        if resource is None and self._missing_file_handling is not MissingFileHandling.IGNORE:
            raise MissingResourceFileError(name)
        return resource

    def get_file_or_throw(self, name: ResourceName) -> ResourceFile:
        """Return a file by name, raising for an unknown name under any policy.

        Raises:
            MissingResourceFileError: If no file has this name
        """
        resource = self._snapshot.get(name)
        if resource is None:
            raise MissingResourceFileError(name)
        return resource

    def search_files(
        self, pattern: str, *, case_sensitive: bool = True
    ) -> tuple[ResourceFile, ...]:
        """Return the files whose name contains pattern."""
        return self._snapshot.search(pattern, case_sensitive=case_sensitive)

    def fetch(self) -> ResourceSnapshot:
        """Enumerate the source without publishing the result.

        Raises:
            ResourceAccessError: If enumeration fails
        """
        return self._provider.load_files(self._source)

    def publish(self, snapshot: ResourceSnapshot) -> None:
        """Make snapshot the current one."""
        with self._refresh_lock:
            self._snapshot = snapshot
        logger.debug("Resource snapshot of '%s' has %d file(s)", self._source, len(snapshot))

    def refresh(self) -> ResourceSnapshot:
        """Re-enumerate the source and publish the new snapshot.

        Raises:
            ResourceAccessError: If enumeration fails; the previous snapshot
                stays published
        """
        with self._refresh_lock:
            snapshot = self.fetch()
            self.publish(snapshot)
        return snapshot

    def reload(self) -> bool:
        """Refresh, logging instead of raising. Returns True on success."""
        try:
            self.refresh()
        except Exception:
            logger.exception("Failed to reload resource files from '%s'", self._source)
            return False
        return True

    def _on_watch_event(self, event: WatchEvent) -> None:
        match event.kind:
            case WatchEventKind.CHANGED | WatchEventKind.RENAMED:
                logger.debug("Resource change detected: %s", event.path)
                self.reload()
            case WatchEventKind.ERROR:
                logger.error("Resource watcher error for '%s': %s", event.path, event.error)

    def close(self) -> None:
        """Stop the watcher. Not safe against concurrent lookups."""
        if self._watcher is not None:
            self._watcher.stop()

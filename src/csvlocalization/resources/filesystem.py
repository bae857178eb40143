"""Local filesystem transport.

FileSystemResourceProvider enumerates a directory recursively; a resource's
name is its path relative to the root with "/" separators. Zero-length
files are skipped. A missing root yields an empty snapshot; a root that
exists but cannot be enumerated raises ResourceAccessError.

FileSystemResourceWatcher reports changes under the root through watchdog.
Created, deleted and modified files become CHANGED events, moves become
RENAMED events, and a failure to start observing becomes an ERROR event.

Python 3.13+.
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Callable
from pathlib import Path
from typing import IO, TYPE_CHECKING, Any

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from csvlocalization.enums import WatchEventKind
from csvlocalization.errors import ResourceAccessError
from csvlocalization.resources.types import ResourceFile, ResourceSnapshot, WatchEvent

if TYPE_CHECKING:
    from csvlocalization.resources.types import WatchCallback

__all__ = [
    "FileSystemResourceFile",
    "FileSystemResourceProvider",
    "FileSystemResourceWatcher",
]

logger = logging.getLogger(__name__)


class FileSystemResourceFile(ResourceFile):
    """A file on the local filesystem."""

    __slots__ = ("_path",)

    def __init__(self, path: Path, name: str) -> None:
        super().__init__(path.as_uri() if path.is_absolute() else str(path), name)
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def open(self) -> IO[bytes]:
        try:
            return self._path.open("rb")
        except OSError as e:
            msg = f"Cannot read resource file '{self.name}': {e}"
            raise ResourceAccessError(msg, uri=self.uri) from e


class FileSystemResourceProvider:
    """Enumerates the files below a directory.

    Example:
        >>> provider = FileSystemResourceProvider()
        >>> snapshot = provider.load_files("/srv/app/i18n")
        >>> [f.name for f in snapshot]
        ['localization.csv', 'legacy/fr-FR.csv']
    """

    __slots__ = ()

    def load_files(self, source: str) -> ResourceSnapshot:
        """Enumerate source recursively.

        A missing directory is logged and yields an empty snapshot; callers
        decide whether that is acceptable.

        Raises:
            ResourceAccessError: If the directory exists but cannot be
                enumerated completely
        """
        root = Path(source).resolve()
        if not root.is_dir():
            logger.warning("Resource directory '%s' does not exist", root)
            return ResourceSnapshot.empty(str(root))

        files: list[ResourceFile] = []
        try:
            for path in root.rglob("*"):
                if not path.is_file():
                    continue
                if path.stat().st_size == 0:
                    logger.debug("Skipping empty resource file '%s'", path)
                    continue
                name = path.relative_to(root).as_posix()
                files.append(FileSystemResourceFile(path, name))
        except OSError as e:
            msg = f"Failed to enumerate resource directory '{root}': {e}"
            raise ResourceAccessError(msg, uri=str(root)) from e

        logger.info("Loaded %d resource file(s) from '%s'", len(files), root)
        return ResourceSnapshot.from_files(files, str(root))


class _EventForwarder(FileSystemEventHandler):
    """Translates watchdog events into WatchEvents."""

    def __init__(self, emit: Callable[[WatchEvent], None]) -> None:
        super().__init__()
        self._emit = emit

    def _changed(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._emit(WatchEvent(WatchEventKind.CHANGED, os.fsdecode(event.src_path)))

    on_created = _changed
    on_deleted = _changed
    on_modified = _changed

    def on_moved(self, event: FileSystemEvent) -> None:
        self._emit(
            WatchEvent(
                WatchEventKind.RENAMED,
                os.fsdecode(event.src_path),
                dest_path=os.fsdecode(event.dest_path),
            )
        )


class FileSystemResourceWatcher:
    """Observes a directory tree and notifies subscribers of changes.

    Callbacks run on the observer thread. An exception raised by a callback
    is logged and does not stop delivery to other subscribers.

    Args:
        root: Directory to observe recursively
        observer_factory: Builds the watchdog observer (tests inject fakes)
    """

    __slots__ = ("_callbacks", "_lock", "_observer", "_observer_factory", "_root")

    def __init__(
        self,
        root: str | Path,
        *,
        observer_factory: Callable[[], Any] = Observer,
    ) -> None:
        self._root = Path(root)
        self._observer_factory = observer_factory
        self._observer: Any = None
        self._callbacks: list[WatchCallback] = []
        self._lock = threading.Lock()

    @property
    def root(self) -> Path:
        return self._root

    @property
    def running(self) -> bool:
        with self._lock:
            return self._observer is not None

    def subscribe(self, callback: WatchCallback) -> None:
        with self._lock:
            self._callbacks.append(callback)

    def start(self) -> None:
        with self._lock:
            if self._observer is not None:
                return
            observer = self._observer_factory()
            try:
                observer.schedule(_EventForwarder(self._emit), str(self._root), recursive=True)
                observer.start()
            except (OSError, RuntimeError) as e:
                logger.error("Failed to watch resource directory '%s': %s", self._root, e)
                error = e
            else:
                self._observer = observer
                logger.info("Watching resource directory '%s'", self._root)
                return
        self._emit(WatchEvent(WatchEventKind.ERROR, str(self._root), error=error))

    def stop(self) -> None:
        with self._lock:
            observer, self._observer = self._observer, None
        if observer is None:
            return
        observer.stop()
        observer.join()
        logger.info("Stopped watching resource directory '%s'", self._root)

    def _emit(self, event: WatchEvent) -> None:
        with self._lock:
            callbacks = tuple(self._callbacks)
        for callback in callbacks:
            try:
                callback(event)
            except Exception:
                logger.exception("Resource watch callback failed for %s", event)

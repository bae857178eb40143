"""Tests for the local filesystem transport.

Tests verify:
- Recursive enumeration with "/"-separated relative names
- Zero-length files are skipped; a missing root yields an empty snapshot
- An enumeration failure raises ResourceAccessError
- FileSystemResourceFile reads fresh content and wraps OSError
- FileSystemResourceWatcher translates watchdog events and reports
  observer failures as ERROR events
"""

import logging
import threading
from pathlib import Path
from typing import Any

import pytest
from watchdog.events import (
    DirModifiedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
    FileSystemEventHandler,
)

from csvlocalization.enums import WatchEventKind
from csvlocalization.errors import ResourceAccessError
from csvlocalization.resources.filesystem import (
    FileSystemResourceFile,
    FileSystemResourceProvider,
    FileSystemResourceWatcher,
)
from csvlocalization.resources.types import WatchEvent


class FakeObserver:
    """Stands in for watchdog's Observer; the test drives the handler."""

    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.handler: FileSystemEventHandler | None = None
        self.path: str | None = None
        self.started = False
        self.stopped = False
        self.joined = False

    def schedule(self, handler: FileSystemEventHandler, path: str, *, recursive: bool) -> None:
        assert recursive
        self.handler = handler
        self.path = path

    def start(self) -> None:
        if self.fail:
            msg = "inotify watch limit reached"
            raise OSError(msg)
        self.started = True

    def stop(self) -> None:
        self.stopped = True

    def join(self, timeout: float | None = None) -> None:
        self.joined = True


class TestFileSystemResourceProvider:
    """Test directory enumeration."""

    def test_recursive_enumeration(self, tmp_path: Path) -> None:
        """Nested files are found and named relative to the root."""
        (tmp_path / "legacy").mkdir()
        (tmp_path / "localization.csv").write_text("key,en-US\n")
        (tmp_path / "legacy" / "fr-FR.csv").write_text("key,value\n")

        snapshot = FileSystemResourceProvider().load_files(str(tmp_path))

        assert snapshot.names == ("legacy/fr-FR.csv", "localization.csv")
        assert snapshot.source == str(tmp_path.resolve())

    def test_zero_length_files_skipped(self, tmp_path: Path) -> None:
        """Empty files are not part of the snapshot."""
        (tmp_path / "empty.csv").write_bytes(b"")
        (tmp_path / "full.csv").write_text("key\n")

        snapshot = FileSystemResourceProvider().load_files(str(tmp_path))

        assert snapshot.names == ("full.csv",)

    def test_missing_directory(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        """A missing root yields an empty snapshot and a warning."""
        with caplog.at_level(logging.WARNING):
            snapshot = FileSystemResourceProvider().load_files(str(tmp_path / "absent"))

        assert len(snapshot) == 0
        assert "does not exist" in caplog.text

    def test_enumeration_failure_raises(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """An unreadable root raises instead of yielding a partial snapshot."""
        (tmp_path / "localization.csv").write_text("key,en-US\n")

        def denied(self: Path, pattern: str) -> Any:
            raise PermissionError(13, "Permission denied", str(self))

        monkeypatch.setattr(Path, "rglob", denied)

        with pytest.raises(ResourceAccessError, match="Failed to enumerate") as exc_info:
            FileSystemResourceProvider().load_files(str(tmp_path))

        assert exc_info.value.uri == str(tmp_path.resolve())
        assert isinstance(exc_info.value.__cause__, PermissionError)

    def test_content_read_fresh(self, tmp_path: Path) -> None:
        """Every open() reads the current file content."""
        path = tmp_path / "localization.csv"
        path.write_text("one")
        resource = FileSystemResourceProvider().load_files(str(tmp_path)).get("localization.csv")
        assert resource is not None

        path.write_text("two")

        assert resource.read_text() == "two"


class TestFileSystemResourceFile:
    """Test single-file access."""

    def test_uri_is_file_uri(self, tmp_path: Path) -> None:
        """Absolute paths get a file:// URI."""
        path = tmp_path / "a.csv"
        path.write_text("x")

        resource = FileSystemResourceFile(path, "a.csv")

        assert resource.uri == path.as_uri()
        assert resource.path == path

    def test_deleted_file(self, tmp_path: Path) -> None:
        """Reading a file that vanished raises ResourceAccessError."""
        resource = FileSystemResourceFile(tmp_path / "gone.csv", "gone.csv")

        with pytest.raises(ResourceAccessError) as exc_info:
            resource.read_bytes()

        assert exc_info.value.uri == resource.uri
        assert isinstance(exc_info.value.__cause__, OSError)


class TestFileSystemResourceWatcher:
    """Test watchdog event translation with an injected observer."""

    def _watcher(self, tmp_path: Path, observer: FakeObserver) -> tuple[
        FileSystemResourceWatcher, list[WatchEvent]
    ]:
        watcher = FileSystemResourceWatcher(tmp_path, observer_factory=lambda: observer)
        events: list[WatchEvent] = []
        watcher.subscribe(events.append)
        return watcher, events

    def test_start_schedules_root(self, tmp_path: Path) -> None:
        """start() watches the root recursively; stop() shuts down."""
        observer = FakeObserver()
        watcher, _ = self._watcher(tmp_path, observer)

        watcher.start()
        assert watcher.running
        assert observer.started
        assert observer.path == str(tmp_path)

        watcher.stop()
        assert not watcher.running
        assert observer.stopped
        assert observer.joined

    def test_start_and_stop_idempotent(self, tmp_path: Path) -> None:
        """Repeated start() and stop() calls are harmless."""
        calls: list[FakeObserver] = []

        def factory() -> Any:
            observer = FakeObserver()
            calls.append(observer)
            return observer

        watcher = FileSystemResourceWatcher(tmp_path, observer_factory=factory)
        watcher.start()
        watcher.start()
        watcher.stop()
        watcher.stop()

        assert len(calls) == 1

    def test_file_events_are_changes(self, tmp_path: Path) -> None:
        """Created, modified and deleted files become CHANGED events."""
        observer = FakeObserver()
        watcher, events = self._watcher(tmp_path, observer)
        watcher.start()
        assert observer.handler is not None
        path = str(tmp_path / "localization.csv")

        observer.handler.dispatch(FileCreatedEvent(path))
        observer.handler.dispatch(FileModifiedEvent(path))
        observer.handler.dispatch(FileDeletedEvent(path))

        assert [event.kind for event in events] == [WatchEventKind.CHANGED] * 3
        assert all(event.path == path for event in events)

    def test_directory_modifications_ignored(self, tmp_path: Path) -> None:
        """Directory metadata changes are not reported."""
        observer = FakeObserver()
        watcher, events = self._watcher(tmp_path, observer)
        watcher.start()
        assert observer.handler is not None

        observer.handler.dispatch(DirModifiedEvent(str(tmp_path)))

        assert events == []

    def test_move_is_rename(self, tmp_path: Path) -> None:
        """Moves become RENAMED events carrying both paths."""
        observer = FakeObserver()
        watcher, events = self._watcher(tmp_path, observer)
        watcher.start()
        assert observer.handler is not None
        old, new = str(tmp_path / "a.csv"), str(tmp_path / "b.csv")

        observer.handler.dispatch(FileMovedEvent(old, new))

        assert events == [WatchEvent(WatchEventKind.RENAMED, old, dest_path=new)]

    def test_start_failure_emits_error(self, tmp_path: Path) -> None:
        """An observer that cannot start produces an ERROR event."""
        watcher, events = self._watcher(tmp_path, FakeObserver(fail=True))

        watcher.start()

        assert not watcher.running
        assert len(events) == 1
        assert events[0].kind is WatchEventKind.ERROR
        assert isinstance(events[0].error, OSError)

    def test_failing_callback_isolated(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A raising subscriber is logged and later subscribers still run."""
        observer = FakeObserver()
        watcher = FileSystemResourceWatcher(tmp_path, observer_factory=lambda: observer)
        received: list[WatchEvent] = []

        def broken(event: WatchEvent) -> None:
            msg = "subscriber bug"
            raise RuntimeError(msg)

        watcher.subscribe(broken)
        watcher.subscribe(received.append)
        watcher.start()
        assert observer.handler is not None

        with caplog.at_level(logging.ERROR):
            observer.handler.dispatch(FileModifiedEvent(str(tmp_path / "a.csv")))

        assert len(received) == 1
        assert "callback failed" in caplog.text

    def test_real_observer_reports_write(self, tmp_path: Path) -> None:
        """With watchdog's own observer, writing a file is reported."""
        changed = threading.Event()
        watcher = FileSystemResourceWatcher(tmp_path)
        watcher.subscribe(lambda event: changed.set())
        watcher.start()
        try:
            (tmp_path / "localization.csv").write_text("key,en-US\n")
            assert changed.wait(5)
        finally:
            watcher.stop()

"""Tests for ReloadCoordinator.

Tests verify:
- A successful reload swaps the table and publishes the snapshot
- A failed reload keeps the previous table and snapshot
- Overlapping triggers are dropped, never queued
- Bursts of watcher events are debounced into one reload
- close() stops the consumer thread
"""

import threading
import time

import pytest

from csvlocalization.config import LocalizationConfig
from csvlocalization.enums import ReloadState, WatchEventKind
from csvlocalization.errors import IngestionError, ResourceAccessError
from csvlocalization.localization.coordinator import ReloadCoordinator
from csvlocalization.localization.ingestion import CsvIngestionPipeline
from csvlocalization.resources.manager import ResourceFileManager
from csvlocalization.resources.types import WatchEvent
from csvlocalization.runtime.store import LocalizationStore
from tests.helpers.resources import SAMPLE_CSV, MemoryProvider, wait_until


class _Setup:
    def __init__(self, config: LocalizationConfig, debounce: float = 0.0) -> None:
        self.provider = MemoryProvider({"localization.csv": SAMPLE_CSV})
        self.manager = ResourceFileManager(self.provider, "memory")
        self.store = LocalizationStore()
        self.coordinator = ReloadCoordinator(
            self.manager, CsvIngestionPipeline(config), self.store, debounce=debounce
        )


class TestReload:
    """Test single reload runs."""

    def test_successful_reload(self, config: LocalizationConfig) -> None:
        """The new table is stored and the snapshot published."""
        setup = _Setup(config)
        setup.provider.files["localization.csv"] = "key,en-US\ngreeting,Hi\n"

        result = setup.coordinator.reload("manual")

        assert result is not None
        assert result.success
        assert result.trigger == "manual"
        assert result.error is None
        assert setup.store.get().translate("greeting", "en-US") == "Hi"
        assert setup.coordinator.last_result is result
        assert setup.coordinator.state is ReloadState.IDLE

    def test_failed_ingestion_keeps_data(self, config: LocalizationConfig) -> None:
        """A malformed CSV leaves the previous table and snapshot in place."""
        setup = _Setup(config)
        setup.coordinator.reload()
        table, snapshot = setup.store.get(), setup.manager.get_files()
        setup.provider.files["localization.csv"] = "key,en-US,en-US\ngreeting,a,b\n"

        result = setup.coordinator.reload()

        assert result is not None
        assert not result.success
        assert isinstance(result.error, IngestionError)
        assert setup.store.get() is table
        assert setup.manager.get_files() is snapshot

    def test_failed_transport_keeps_data(self, config: LocalizationConfig) -> None:
        """A provider failure is reported, not raised."""
        setup = _Setup(config)
        setup.coordinator.reload()
        table = setup.store.get()
        setup.provider.error = ResourceAccessError("server down")

        result = setup.coordinator.reload()

        assert result is not None
        assert isinstance(result.error, ResourceAccessError)
        assert setup.store.get() is table

    def test_empty_result_rejected(self, config: LocalizationConfig) -> None:
        """A reload producing no entries does not wipe the table."""
        setup = _Setup(config)
        setup.coordinator.reload()
        table = setup.store.get()
        setup.provider.files["localization.csv"] = "key,en-US\n"

        result = setup.coordinator.reload()

        assert result is not None
        assert isinstance(result.error, ValueError)
        assert setup.store.get() is table

    def test_empty_result_allowed_on_request(self, config: LocalizationConfig) -> None:
        """allow_empty publishes a table without keys."""
        setup = _Setup(config)
        setup.provider.files["localization.csv"] = "key,en-US\n"

        result = setup.coordinator.reload("startup", allow_empty=True)

        assert result is not None
        assert result.success
        assert len(setup.store.get()) == 0
        assert setup.store.version == 1

    def test_overlapping_reload_dropped(self, config: LocalizationConfig) -> None:
        """A trigger arriving mid-reload returns None."""
        setup = _Setup(config)
        gate = threading.Event()
        setup.provider.gate = gate
        results: list[object] = []
        worker = threading.Thread(target=lambda: results.append(setup.coordinator.reload()))
        worker.start()
        assert wait_until(lambda: setup.coordinator.state is ReloadState.RELOADING)

        assert setup.coordinator.reload("manual") is None

        gate.set()
        worker.join()
        assert results[0] is not None

    def test_negative_debounce(self, config: LocalizationConfig) -> None:
        """Negative debounce delays are rejected."""
        setup = _Setup(config)

        with pytest.raises(ValueError, match="non-negative"):
            ReloadCoordinator(
                setup.manager, CsvIngestionPipeline(config), setup.store, debounce=-1
            )


class TestWatchDriven:
    """Test event-driven reloads through the consumer thread."""

    def test_event_triggers_reload(self, config: LocalizationConfig) -> None:
        """A change event leads to a "watch" reload."""
        setup = _Setup(config)
        setup.coordinator.start()
        try:
            setup.provider.files["localization.csv"] = "key,en-US\ngreeting,Hi\n"
            setup.coordinator.notify(WatchEvent(WatchEventKind.CHANGED, "localization.csv"))

            assert wait_until(lambda: setup.coordinator.last_result is not None)
            result = setup.coordinator.last_result
            assert result is not None
            assert result.trigger == "watch"
            assert setup.store.get().translate("greeting", "en-US") == "Hi"
        finally:
            setup.coordinator.close()

    def test_burst_debounced(self, config: LocalizationConfig) -> None:
        """Events arriving within the debounce window cause one reload."""
        setup = _Setup(config, debounce=0.3)
        calls_before = setup.provider.calls
        setup.coordinator.start()
        try:
            for _ in range(10):
                setup.coordinator.notify(WatchEvent(WatchEventKind.CHANGED, "localization.csv"))

            assert wait_until(lambda: setup.coordinator.last_result is not None)
            time.sleep(0.5)
            assert setup.provider.calls - calls_before == 1
        finally:
            setup.coordinator.close()

    def test_error_event_does_not_reload(
        self, config: LocalizationConfig, caplog: pytest.LogCaptureFixture
    ) -> None:
        """ERROR events are logged only."""
        setup = _Setup(config)
        setup.coordinator.start()
        try:
            setup.coordinator.notify(
                WatchEvent(WatchEventKind.ERROR, error=OSError("watch limit"))
            )
            time.sleep(0.1)
        finally:
            setup.coordinator.close()

        assert setup.coordinator.last_result is None
        assert "watch limit" in caplog.text

    def test_close_stops_worker(self, config: LocalizationConfig) -> None:
        """After close() events are no longer processed; close is idempotent."""
        setup = _Setup(config)
        setup.coordinator.start()
        setup.coordinator.close(timeout=5)
        setup.coordinator.close()

        setup.coordinator.notify(WatchEvent(WatchEventKind.CHANGED, "localization.csv"))
        time.sleep(0.1)

        assert setup.coordinator.last_result is None

    def test_restart_after_close_during_debounce(self, config: LocalizationConfig) -> None:
        """A worker stopped mid-debounce leaves nothing behind for the next one."""
        setup = _Setup(config, debounce=0.2)
        setup.coordinator.start()
        setup.coordinator.notify(WatchEvent(WatchEventKind.CHANGED, "localization.csv"))
        time.sleep(0.05)
        setup.coordinator.close(timeout=5)
        assert setup.coordinator.last_result is None

        setup.coordinator.start()
        try:
            setup.coordinator.notify(WatchEvent(WatchEventKind.CHANGED, "localization.csv"))

            assert wait_until(lambda: setup.coordinator.last_result is not None)
        finally:
            setup.coordinator.close(timeout=5)

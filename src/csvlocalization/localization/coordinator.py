"""Reload coordination: provider, then ingestion, then store swap.

ReloadCoordinator is a two-state machine (IDLE, RELOADING). A reload runs
the whole pipeline on fresh data and publishes the result with one store
swap. Reloads never overlap: a trigger that arrives while a reload is in
flight is dropped, not queued.

Watcher events are fed into a single-consumer queue. The consumer thread
waits the debounce delay after the first event, drains everything that
arrived meanwhile, and runs one reload for the whole burst.

A failing reload is logged and recorded in a ReloadResult; the previously
published snapshot and table stay in place.

Python 3.13+.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from csvlocalization.constants import DEFAULT_RELOAD_DEBOUNCE
from csvlocalization.enums import ReloadState, WatchEventKind

if TYPE_CHECKING:
    from csvlocalization.localization.ingestion import CsvIngestionPipeline
    from csvlocalization.resources.manager import ResourceFileManager
    from csvlocalization.resources.types import WatchEvent
    from csvlocalization.runtime.store import LocalizationStore

__all__ = ["ReloadCoordinator", "ReloadResult"]

logger = logging.getLogger(__name__)

_STOP: Final = object()


@dataclass(frozen=True, slots=True)
class ReloadResult:
    """Outcome of one reload attempt.

    Attributes:
        success: True when the new table was published
        trigger: What started the reload ("startup", "manual", "watch", ...)
        duration: Wall-clock seconds spent in the pipeline
        error: The exception that aborted the reload, if any
    """

    success: bool
    trigger: str
    duration: float
    error: Exception | None = None


class ReloadCoordinator:
    """Runs the reload pipeline on startup, on demand and on change events.

    Args:
        manager: Resource snapshot holder; its new snapshot is published
            only once the table built from it is in the store
        ingestion: Parses the refreshed snapshot
        store: Receives the parsed table
        debounce: Seconds to wait after a change event before reloading

    Example:
        >>> coordinator = ReloadCoordinator(manager, CsvIngestionPipeline(config), store)
        >>> coordinator.reload("startup").success
        True
        >>> watcher.subscribe(coordinator.notify)
        >>> coordinator.start()
    """

    __slots__ = (
        "_debounce",
        "_events",
        "_ingestion",
        "_last_result",
        "_manager",
        "_state",
        "_state_lock",
        "_stopping",
        "_store",
        "_worker",
    )

    def __init__(
        self,
        manager: ResourceFileManager,
        ingestion: CsvIngestionPipeline,
        store: LocalizationStore,
        *,
        debounce: float = DEFAULT_RELOAD_DEBOUNCE,
    ) -> None:
        if debounce < 0:
            msg = f"debounce must be non-negative, got {debounce}"
            raise ValueError(msg)
        self._manager = manager
        self._ingestion = ingestion
        self._store = store
        self._debounce = debounce
        self._state = ReloadState.IDLE
        self._state_lock = threading.Lock()
        self._last_result: ReloadResult | None = None
        self._events: queue.SimpleQueue[object] = queue.SimpleQueue()
        self._stopping = threading.Event()
        self._worker: threading.Thread | None = None

    @property
    def state(self) -> ReloadState:
        with self._state_lock:
            return self._state

    @property
    def last_result(self) -> ReloadResult | None:
        with self._state_lock:
            return self._last_result

    def reload(
        self, trigger: str = "manual", *, allow_empty: bool = False
    ) -> ReloadResult | None:
        """Run the pipeline once, unless a reload is already in flight.

        Never raises for pipeline failures; they are logged and returned.

        Args:
            trigger: Label recorded in the result and the log
            allow_empty: Publish a table without any key (the initial load)

        Returns:
            The outcome, or None when the trigger was dropped because
            another reload was running
        """
        with self._state_lock:
            if self._state is ReloadState.RELOADING:
                logger.debug("Reload already in progress; dropping '%s' trigger", trigger)
                return None
            self._state = ReloadState.RELOADING

        logger.info("Reloading localization data (trigger: %s)", trigger)
        started = time.perf_counter()
        try:
            snapshot = self._manager.fetch()
            table = self._ingestion.ingest(snapshot)
            self._store.replace(table, allow_empty=allow_empty)
            self._manager.publish(snapshot)
        except Exception as e:
            logger.exception("Localization reload failed; keeping previous data")
            result = ReloadResult(False, trigger, time.perf_counter() - started, e)
        else:
            result = ReloadResult(True, trigger, time.perf_counter() - started)
            logger.info("Localization reload completed in %.3fs", result.duration)

        with self._state_lock:
            self._state = ReloadState.IDLE
            self._last_result = result
        return result

    def notify(self, event: WatchEvent) -> None:
        """Watcher callback: queue a debounced reload.

        Runs on the watcher's thread and never blocks it.
        """
        if event.kind is WatchEventKind.ERROR:
            logger.error("Resource watcher reported an error: %s", event.error)
            return
        if self.state is ReloadState.RELOADING:
            logger.debug("Reload in progress; dropping change event for '%s'", event.path)
            return
        self._events.put(event)

    def start(self) -> None:
        """Start the consumer thread that turns change events into reloads."""
        if self._worker is not None:
            return
        self._stopping.clear()
        self._worker = threading.Thread(
            target=self._consume, name="csvlocalization-reload", daemon=True
        )
        self._worker.start()

    def close(self, timeout: float | None = None) -> None:
        """Stop the consumer thread; a reload in flight runs to completion."""
        worker, self._worker = self._worker, None
        if worker is None:
            return
        self._stopping.set()
        self._events.put(_STOP)
        worker.join(timeout)
        if not worker.is_alive():
            self._drain()

    def _drain(self) -> None:
        """Discard queued events and a stop sentinel the worker never read."""
        while True:
            try:
                self._events.get_nowait()
            except queue.Empty:
                return

    def _consume(self) -> None:
        while True:
            item = self._events.get()
            if item is _STOP:
                return
            # Coalesce the burst that follows a single logical write.
            if self._stopping.wait(self._debounce):
                return
            while True:
                try:
                    item = self._events.get_nowait()
                except queue.Empty:
                    break
                if item is _STOP:
                    return
            self.reload("watch")

"""Readers-writer lock guarding the live localization table.

Lookups take the shared side; a reload swap takes the exclusive side.
Writers are preferred: once a swap is waiting, new lookups queue behind it,
so a steady stream of lookups cannot postpone a reload forever.

The shared side is reentrant per thread (a resolver that looks up a "$L."
argument while already reading is fine). Upgrading shared to exclusive,
downgrading, and re-entering the exclusive side all raise RuntimeError,
since each of them would deadlock or hide a bug.

Python 3.13+.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

__all__ = ["RWLock"]


def _check_timeout(timeout: float | None) -> None:
    if timeout is not None and timeout < 0:
        msg = f"Timeout must be non-negative, got {timeout}"
        raise ValueError(msg)


class RWLock:
    """Shared/exclusive lock with writer preference and optional timeouts.

    Example:
        >>> lock = RWLock()
        >>> with lock.read():
        ...     with lock.read():
        ...         pass
        >>> with lock.write(timeout=1.0):
        ...     pass
    """

    __slots__ = ("_cond", "_readers", "_writer", "_writers_waiting")

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        # thread id -> reentrant read depth
        self._readers: dict[int, int] = {}
        self._writer: int | None = None
        self._writers_waiting = 0

    def _wait_for(self, ready: Callable[[], bool], timeout: float | None, side: str) -> None:
        """Wait on the condition until ready() holds. Caller owns the condition."""
        deadline = None if timeout is None else time.monotonic() + timeout
        while not ready():
            if deadline is None:
                self._cond.wait()
                continue
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                msg = f"Timed out waiting for {side} lock"
                raise TimeoutError(msg)
            self._cond.wait(remaining)

    @contextmanager
    def read(self, timeout: float | None = None) -> Generator[None]:
        """Hold the shared side for the duration of the block.

        Args:
            timeout: Seconds to wait; None waits forever, 0.0 does not block

        Raises:
            RuntimeError: If the calling thread holds the write lock
            TimeoutError: If the lock was not acquired in time
            ValueError: If timeout is negative
        """
        self.acquire_read(timeout)
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write(self, timeout: float | None = None) -> Generator[None]:
        """Hold the exclusive side for the duration of the block.

        Args:
            timeout: Seconds to wait; None waits forever, 0.0 does not block

        Raises:
            RuntimeError: If the calling thread already holds either side
            TimeoutError: If the lock was not acquired in time
            ValueError: If timeout is negative
        """
        self.acquire_write(timeout)
        try:
            yield
        finally:
            self.release_write()

    def acquire_read(self, timeout: float | None = None) -> None:
        """Acquire the shared side. Prefer the read() context manager."""
        _check_timeout(timeout)
        me = threading.get_ident()
        with self._cond:
            depth = self._readers.get(me)
            if depth is not None:
                self._readers[me] = depth + 1
                return
            if self._writer == me:
                msg = "Cannot acquire read lock while holding write lock"
                raise RuntimeError(msg)
            self._wait_for(
                lambda: self._writer is None and self._writers_waiting == 0,
                timeout,
                "read",
            )
            self._readers[me] = 1

    def release_read(self) -> None:
        """Release one level of the shared side."""
        me = threading.get_ident()
        with self._cond:
            depth = self._readers.get(me)
            if depth is None:
                msg = "Thread does not hold read lock"
                raise RuntimeError(msg)
            if depth > 1:
                self._readers[me] = depth - 1
                return
            del self._readers[me]
            if not self._readers:
                self._cond.notify_all()

    def acquire_write(self, timeout: float | None = None) -> None:
        """Acquire the exclusive side. Prefer the write() context manager."""
        _check_timeout(timeout)
        me = threading.get_ident()
        with self._cond:
            if me in self._readers:
                msg = "Cannot upgrade read lock to write lock"
                raise RuntimeError(msg)
            if self._writer == me:
                msg = "Write lock is not reentrant"
                raise RuntimeError(msg)
            self._writers_waiting += 1
            try:
                self._wait_for(
                    lambda: not self._readers and self._writer is None,
                    timeout,
                    "write",
                )
                self._writer = me
            finally:
                self._writers_waiting -= 1
                # Readers blocked only by this waiting writer must re-check.
                self._cond.notify_all()

    def release_write(self) -> None:
        """Release the exclusive side."""
        with self._cond:
            if self._writer != threading.get_ident():
                msg = "Thread does not hold write lock"
                raise RuntimeError(msg)
            self._writer = None
            self._cond.notify_all()

    @property
    def reader_count(self) -> int:
        """Number of distinct threads holding the shared side."""
        with self._cond:
            return len(self._readers)

    @property
    def writer_active(self) -> bool:
        """Whether some thread holds the exclusive side."""
        with self._cond:
            return self._writer is not None

    @property
    def writers_waiting(self) -> int:
        """Number of threads blocked on the exclusive side."""
        with self._cond:
            return self._writers_waiting

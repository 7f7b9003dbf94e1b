"""Thread-backed periodic tick source for the timer manager."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional


class ThreadTickHandle:
    """One daemon thread firing a callback on a fixed, drift-free cadence."""

    def __init__(
        self,
        callback: Callable[[], None],
        *,
        interval_seconds: float,
        fire_immediately: bool,
        logger: logging.Logger,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be greater than zero")

        self._callback = callback
        self._interval_seconds = float(interval_seconds)
        self._fire_immediately = fire_immediately
        self._logger = logger
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            daemon=True,
            name="timer-ticks",
        )

    @property
    def cancelled(self) -> bool:
        return self._stop_event.is_set()

    def start(self) -> None:
        self._thread.start()

    def cancel(self) -> None:
        """Stop future ticks. Safe to call repeatedly and from the tick thread.

        Does not join: the caller may hold a lock the tick thread is waiting on.
        """
        self._stop_event.set()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the tick thread to exit; returns False on timeout."""
        if threading.current_thread() is self._thread:
            return False
        self._thread.join(timeout=timeout)
        return not self._thread.is_alive()

    def _run(self) -> None:
        started_at = time.monotonic()
        if self._fire_immediately:
            self._fire()

        periods = 0
        while True:
            periods += 1
            deadline = started_at + periods * self._interval_seconds
            if self._stop_event.wait(max(0.0, deadline - time.monotonic())):
                return
            self._fire()

    def _fire(self) -> None:
        if self._stop_event.is_set():
            return
        try:
            self._callback()
        except Exception:
            self._logger.exception("Timer tick callback failed")


class ThreadingIntervalScheduler:
    """Scheduler creating one `ThreadTickHandle` per schedule call."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger("ticks")

    def schedule(
        self,
        callback: Callable[[], None],
        *,
        interval_seconds: float,
        fire_immediately: bool = True,
    ) -> ThreadTickHandle:
        handle = ThreadTickHandle(
            callback,
            interval_seconds=interval_seconds,
            fire_immediately=fire_immediately,
            logger=self._logger,
        )
        handle.start()
        self._logger.debug(
            "Scheduled ticks every %.3fs (fire_immediately=%s)",
            interval_seconds,
            fire_immediately,
        )
        return handle

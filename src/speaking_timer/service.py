"""Thread-safe in-memory count-up timer with periodic spoken announcements."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Literal, Optional

from spoken_time import format_elapsed_announcement

from .constants import (
    ACTION_PAUSE,
    ACTION_RESET,
    ACTION_START,
    ACTION_TICK,
    ANNOUNCEMENT_INTERVAL_SECONDS,
    AUTO_STOP_SECONDS,
    PHASE_IDLE,
    PHASE_RUNNING,
    REASON_ALREADY_RUNNING,
    REASON_AUTO_STOPPED,
    REASON_NOT_RUNNING,
    REASON_PAUSED,
    REASON_RESET,
    REASON_STARTED,
    REASON_TICK,
    TICK_INTERVAL_SECONDS,
)
from .contracts import IntervalScheduler, SpeechSink, TickHandle

TimerPhase = Literal["idle", "running"]
TimerAction = Literal["start", "pause", "reset", "tick"]


@dataclass(frozen=True)
class TimerSnapshot:
    """Immutable timer snapshot exposed to the view layer."""
    elapsed_seconds: int
    running: bool

    @property
    def minutes(self) -> int:
        return self.elapsed_seconds // 60

    @property
    def seconds(self) -> int:
        return self.elapsed_seconds % 60

    @property
    def phase(self) -> TimerPhase:
        return PHASE_RUNNING if self.running else PHASE_IDLE


@dataclass(frozen=True)
class TimerActionResult:
    """Result envelope returned after applying a timer action."""
    action: TimerAction
    accepted: bool
    reason: str
    snapshot: TimerSnapshot


class TimerManager:
    """Count-up timer that announces elapsed time every half minute.

    The manager owns the elapsed seconds and the running flag. Ticks come
    from an injected `IntervalScheduler`; announcements go to an injected
    `SpeechSink`. The timer stops itself once one hour has elapsed.
    """

    def __init__(
        self,
        *,
        scheduler: IntervalScheduler,
        speech: SpeechSink,
        on_change: Optional[Callable[[TimerSnapshot], None]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._scheduler = scheduler
        self._speech = speech
        self._on_change = on_change
        self._logger = logger or logging.getLogger("timer")
        self._lock = threading.Lock()
        # Serializes listener calls so they are delivered in commit order.
        self._notify_lock = threading.RLock()
        self._revision = 0
        self._delivered_revision = 0

        self._elapsed_seconds = 0
        self._minutes = 0
        self._seconds = 0
        self._running = False
        self._tick_handle: Optional[TickHandle] = None

    @property
    def minutes(self) -> int:
        with self._lock:
            return self._minutes

    @property
    def seconds(self) -> int:
        with self._lock:
            return self._seconds

    @property
    def elapsed_seconds(self) -> int:
        with self._lock:
            return self._elapsed_seconds

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._running

    def snapshot(self) -> TimerSnapshot:
        with self._lock:
            return self._snapshot_locked()

    def start(self) -> TimerActionResult:
        with self._lock:
            if self._running:
                return self._result_locked(ACTION_START, False, REASON_ALREADY_RUNNING)

            self._running = True
            # The handle slot must be filled before the first tick can run.
            handle_slot: list[TickHandle] = []
            handle = self._scheduler.schedule(
                lambda: self._on_tick(handle_slot),
                interval_seconds=TICK_INTERVAL_SECONDS,
                fire_immediately=True,
            )
            handle_slot.append(handle)
            self._tick_handle = handle
            self._logger.info("Timer started at %ss", self._elapsed_seconds)
            result = self._result_locked(ACTION_START, True, REASON_STARTED)
            revision = self._commit_locked()

        self._notify(result.snapshot, revision)
        return result

    def pause(self) -> TimerActionResult:
        with self._lock:
            if not self._running:
                return self._result_locked(ACTION_PAUSE, False, REASON_NOT_RUNNING)

            self._pause_locked()
            self._logger.info("Timer paused at %ss", self._elapsed_seconds)
            result = self._result_locked(ACTION_PAUSE, True, REASON_PAUSED)
            revision = self._commit_locked()

        self._notify(result.snapshot, revision)
        return result

    def reset(self) -> TimerActionResult:
        with self._lock:
            self._pause_locked()
            self._set_elapsed_locked(0)
            self._logger.info("Timer reset")
            result = self._result_locked(ACTION_RESET, True, REASON_RESET)
            revision = self._commit_locked()

        self._notify(result.snapshot, revision)
        return result

    def update_time(self, total_seconds: int) -> TimerActionResult:
        """Commit a new elapsed value, announcing and auto-stopping as needed.

        Ticks call this with the previous value plus one. Tests call it
        directly to simulate elapsed time without waiting.
        """
        with self._lock:
            result = self._update_time_locked(total_seconds)
            revision = self._commit_locked()

        self._notify(result.snapshot, revision)
        return result

    def speak_time(self) -> bool:
        """Announce the current elapsed time; returns whether a phrase was sent."""
        with self._lock:
            return self._speak_time_locked()

    def _on_tick(self, handle_slot: list[TickHandle]) -> None:
        with self._lock:
            # Ticks from a cancelled schedule may still arrive; drop them.
            if not handle_slot or handle_slot[0] is not self._tick_handle:
                return
            result = self._update_time_locked(self._elapsed_seconds + 1)
            revision = self._commit_locked()

        self._notify(result.snapshot, revision)

    def _update_time_locked(self, total_seconds: int) -> TimerActionResult:
        total_seconds = max(0, int(total_seconds))
        self._set_elapsed_locked(total_seconds)

        if (
            total_seconds > 0
            and total_seconds % ANNOUNCEMENT_INTERVAL_SECONDS == 0
            and total_seconds <= AUTO_STOP_SECONDS
        ):
            self._speak_time_locked()

        if total_seconds >= AUTO_STOP_SECONDS and self._running:
            self._pause_locked()
            self._logger.info("Timer stopped automatically after %ss", total_seconds)
            return self._result_locked(ACTION_TICK, True, REASON_AUTO_STOPPED)

        return self._result_locked(ACTION_TICK, True, REASON_TICK)

    def _speak_time_locked(self) -> bool:
        if self._speech.is_busy():
            self._logger.debug(
                "Skipping announcement at %ss: speech sink busy",
                self._elapsed_seconds,
            )
            return False

        phrase = format_elapsed_announcement(self._minutes, self._seconds)
        if not phrase:
            return False

        self._logger.debug("Announcing elapsed time: %r", phrase)
        self._speech.speak(phrase)
        return True

    def _pause_locked(self) -> None:
        self._running = False
        handle = self._tick_handle
        self._tick_handle = None
        if handle is not None:
            handle.cancel()

    def _set_elapsed_locked(self, total_seconds: int) -> None:
        self._elapsed_seconds = total_seconds
        self._minutes = total_seconds // 60
        self._seconds = total_seconds % 60

    def _snapshot_locked(self) -> TimerSnapshot:
        return TimerSnapshot(
            elapsed_seconds=self._elapsed_seconds,
            running=self._running,
        )

    def _result_locked(
        self,
        action: TimerAction,
        accepted: bool,
        reason: str,
    ) -> TimerActionResult:
        return TimerActionResult(
            action=action,
            accepted=accepted,
            reason=reason,
            snapshot=self._snapshot_locked(),
        )

    def _commit_locked(self) -> int:
        self._revision += 1
        return self._revision

    def _notify(self, snapshot: TimerSnapshot, revision: int) -> None:
        if self._on_change is None:
            return
        with self._notify_lock:
            # A newer commit already reached the listener; this one is stale.
            if revision <= self._delivered_revision:
                return
            self._delivered_revision = revision
            try:
                self._on_change(snapshot)
            except Exception as error:
                self._logger.error("Timer change listener failed: %s", error)

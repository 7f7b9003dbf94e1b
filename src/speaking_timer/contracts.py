"""Protocols for the capabilities injected into the timer manager."""

from __future__ import annotations

from typing import Callable, Protocol


class TickHandle(Protocol):
    """Handle for one active periodic schedule."""

    def cancel(self) -> None: ...


class IntervalScheduler(Protocol):
    """Periodic callback source.

    Implementations must invoke `callback` from their own thread of control,
    never synchronously from inside `schedule()`.
    """

    def schedule(
        self,
        callback: Callable[[], None],
        *,
        interval_seconds: float,
        fire_immediately: bool = True,
    ) -> TickHandle: ...


class SpeechSink(Protocol):
    """Fire-and-forget announcement target with a busy flag."""

    def is_busy(self) -> bool: ...

    def speak(self, text: str) -> None: ...

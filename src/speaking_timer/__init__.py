from .contracts import IntervalScheduler, SpeechSink, TickHandle
from .service import (
    TimerAction,
    TimerActionResult,
    TimerManager,
    TimerPhase,
    TimerSnapshot,
)
from .ticks import ThreadingIntervalScheduler

__all__ = [
    "IntervalScheduler",
    "SpeechSink",
    "ThreadingIntervalScheduler",
    "TickHandle",
    "TimerAction",
    "TimerActionResult",
    "TimerManager",
    "TimerPhase",
    "TimerSnapshot",
]

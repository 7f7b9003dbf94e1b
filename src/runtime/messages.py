"""Status and rejection text builders for the terminal front end."""

from __future__ import annotations

import datetime as dt
from typing import Optional

from notes import Note
from speaking_timer import TimerActionResult, TimerSnapshot
from speaking_timer.constants import (
    ACTION_PAUSE,
    ACTION_START,
    REASON_ALREADY_RUNNING,
    REASON_NOT_RUNNING,
)

HELP_TEXT = """Commands:
  start | pause | toggle | reset | status
  notes                 list saved notes
  note add <text>       save a new note
  note done <n>         toggle note n as resolved
  note delete <n>       delete note n
  help | quit"""

AUTO_STOP_TEXT = "One hour reached, timer stopped."


def format_duration(seconds: int) -> str:
    """Format a duration in seconds as `MM:SS`."""
    minutes, remainder = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{remainder:02d}"


def timer_status_message(snapshot: TimerSnapshot) -> str:
    state = "running" if snapshot.running else "paused"
    if not snapshot.running and snapshot.elapsed_seconds == 0:
        state = "ready"
    return f"{format_duration(snapshot.elapsed_seconds)} {state}"


def timer_result_message(result: TimerActionResult) -> Optional[str]:
    """Text for rejected actions; None when the status line suffices."""
    if result.reason == REASON_ALREADY_RUNNING and result.action == ACTION_START:
        return "Timer is already running."
    if result.reason == REASON_NOT_RUNNING and result.action == ACTION_PAUSE:
        return "Timer is not running."
    return None


def note_line(index: int, note: Note, now: Optional[dt.datetime] = None) -> str:
    mark = "x" if note.realized else " "
    added = note.timestamp.strftime("%Y-%m-%d")
    return f"{index:>3}. [{mark}] {note.text}  (added {added}, {note.days_ago(now)} days ago)"

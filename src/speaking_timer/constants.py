"""State, action, reason, and timing constants used by the speaking timer."""

from __future__ import annotations

TICK_INTERVAL_SECONDS = 1.0
ANNOUNCEMENT_INTERVAL_SECONDS = 30
AUTO_STOP_SECONDS = 60 * 60

PHASE_IDLE = "idle"
PHASE_RUNNING = "running"

ACTION_START = "start"
ACTION_PAUSE = "pause"
ACTION_RESET = "reset"
ACTION_TICK = "tick"

REASON_STARTED = "started"
REASON_ALREADY_RUNNING = "already_running"
REASON_PAUSED = "paused"
REASON_NOT_RUNNING = "not_running"
REASON_RESET = "reset"
REASON_TICK = "tick"
REASON_AUTO_STOPPED = "auto_stopped"

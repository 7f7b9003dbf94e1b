"""Line-oriented terminal front end for the speaking timer and notes list."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional, TextIO

from notes import NotesStorageError, NotesStore
from speaking_timer import (
    IntervalScheduler,
    SpeechSink,
    TimerActionResult,
    TimerManager,
    TimerSnapshot,
)
from speaking_timer.constants import AUTO_STOP_SECONDS

from .messages import (
    AUTO_STOP_TEXT,
    HELP_TEXT,
    note_line,
    timer_result_message,
    timer_status_message,
)


@dataclass(frozen=True)
class ConsoleDependencies:
    """Collaborators and streams required by the terminal front end."""
    scheduler: IntervalScheduler
    speech: SpeechSink
    notes: NotesStore
    stdin: TextIO
    stdout: TextIO
    logger: logging.Logger
    show_ticks: bool = True


class ConsoleRuntime:
    """Reads commands, drives the timer, and prints pushed status lines."""
    def __init__(self, dependencies: ConsoleDependencies):
        self._deps = dependencies
        self._write_lock = threading.RLock()
        self._last_snapshot: Optional[TimerSnapshot] = None
        self.timer = TimerManager(
            scheduler=dependencies.scheduler,
            speech=dependencies.speech,
            on_change=self._on_timer_change,
            logger=logging.getLogger("timer"),
        )

    def run(self) -> int:
        self._write(HELP_TEXT)
        try:
            self._deps.notes.load()
        except NotesStorageError as error:
            self._deps.logger.error("Failed to load notes: %s", error)
            self._write(f"Notes unavailable: {error}")

        for line in self._deps.stdin:
            if not self.handle_command(line):
                break
        self.shutdown()
        return 0

    def shutdown(self) -> None:
        self.timer.pause()

    def handle_command(self, line: str) -> bool:
        """Apply one command line; returns False when the user asked to quit."""
        command, _, argument = line.strip().partition(" ")
        command = command.lower()
        argument = argument.strip()

        if not command:
            return True
        if command in ("quit", "exit", "q"):
            return False
        if command == "help":
            self._write(HELP_TEXT)
        elif command == "start":
            self._report(self.timer.start())
        elif command == "pause":
            self._report(self.timer.pause())
        elif command == "toggle":
            action = self.timer.pause if self.timer.is_running else self.timer.start
            self._report(action())
        elif command == "reset":
            self._report(self.timer.reset())
        elif command == "status":
            self._write(timer_status_message(self.timer.snapshot()))
        elif command == "notes":
            self._list_notes()
        elif command == "note":
            self._handle_note_command(argument)
        else:
            self._write(f"Unknown command: {command}. Type 'help' for commands.")
        return True

    def _handle_note_command(self, argument: str) -> None:
        subcommand, _, rest = argument.partition(" ")
        subcommand = subcommand.lower()
        rest = rest.strip()
        notes = self._deps.notes
        try:
            if subcommand == "add":
                note = notes.add(rest)
                if note is None:
                    self._write("Note text cannot be empty.")
                else:
                    self._write("Thank you for sharing your notes.")
            elif subcommand in ("done", "delete"):
                note_id = self._note_id_at(rest)
                if note_id is None:
                    return
                if subcommand == "done":
                    updated = notes.toggle_realized(note_id)
                    if updated is not None:
                        state = "resolved" if updated.realized else "open"
                        self._write(f"Note marked {state}.")
                elif notes.delete(note_id):
                    self._write("Note deleted.")
            else:
                self._write("Usage: note add <text> | note done <n> | note delete <n>")
        except NotesStorageError as error:
            self._deps.logger.error("Failed to save notes: %s", error)
            self._write(f"Could not save notes: {error}")

    def _note_id_at(self, raw_index: str) -> Optional[str]:
        notes = self._deps.notes.list_notes()
        try:
            index = int(raw_index)
        except ValueError:
            self._write("Note number must be an integer.")
            return None
        if not 1 <= index <= len(notes):
            self._write(f"No note number {index}.")
            return None
        return notes[index - 1].id

    def _list_notes(self) -> None:
        notes = self._deps.notes.list_notes()
        if not notes:
            self._write("No notes yet.")
            return
        self._write("\n".join(note_line(i, note) for i, note in enumerate(notes, start=1)))

    def _report(self, result: TimerActionResult) -> None:
        message = timer_result_message(result)
        if message:
            self._write(message)

    def _on_timer_change(self, snapshot: TimerSnapshot) -> None:
        with self._write_lock:
            self._print_timer_change(snapshot)

    def _print_timer_change(self, snapshot: TimerSnapshot) -> None:
        previous = self._last_snapshot
        self._last_snapshot = snapshot

        auto_stopped = (
            previous is not None
            and previous.running
            and not snapshot.running
            and snapshot.elapsed_seconds >= AUTO_STOP_SECONDS
        )
        is_tick = (
            previous is not None
            and previous.running
            and snapshot.running
            and snapshot.elapsed_seconds != previous.elapsed_seconds
        )
        if is_tick and not self._deps.show_ticks:
            return

        self._write(timer_status_message(snapshot))
        if auto_stopped:
            self._write(AUTO_STOP_TEXT)

    def _write(self, text: str) -> None:
        with self._write_lock:
            self._deps.stdout.write(text + "\n")
            self._deps.stdout.flush()

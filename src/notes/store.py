"""Notes persistence on top of a minimal key-value store contract."""

from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Optional, Protocol

from .errors import NotesStorageError
from .models import Note

NOTES_STORAGE_KEY = "SavedWorries"


class KeyValueStore(Protocol):
    """String key-value storage; `get` returns None for unknown keys."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class JsonFileKeyValueStore:
    """Key-value store persisted as one JSON object file."""

    def __init__(self, path: str | Path):
        self._path = Path(path).expanduser()
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            value = self._read_locked().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read_locked()
            data[key] = value
            self._write_locked(data)

    def _read_locked(self) -> dict[str, object]:
        if not self._path.exists():
            return {}
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except OSError as error:
            raise NotesStorageError(f"Failed to read {self._path}: {error}") from error
        except json.JSONDecodeError as error:
            raise NotesStorageError(f"Store file {self._path} is not valid JSON: {error}") from error
        if not isinstance(raw, dict):
            raise NotesStorageError(f"Store file {self._path} must contain a JSON object.")
        return raw

    def _write_locked(self, data: dict[str, object]) -> None:
        temp_path = self._path.with_suffix(f"{self._path.suffix}.tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
            os.replace(temp_path, self._path)
        except OSError as error:
            if temp_path.exists():
                try:
                    temp_path.unlink()
                except OSError:
                    pass
            raise NotesStorageError(f"Failed to write {self._path}: {error}") from error


class NotesStore:
    """Ordered notes list; every mutation saves the whole list."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        key: str = NOTES_STORAGE_KEY,
        logger: Optional[logging.Logger] = None,
    ):
        self._store = store
        self._key = key
        self._logger = logger or logging.getLogger("notes")
        self._notes: list[Note] = []

    def load(self) -> list[Note]:
        raw = self._store.get(self._key)
        if raw is None:
            self._notes = []
            return self.list_notes()

        try:
            entries = json.loads(raw)
            if not isinstance(entries, list):
                raise ValueError("stored notes must be a JSON list")
            self._notes = [Note.from_dict(entry) for entry in entries]
        except (AttributeError, KeyError, TypeError, ValueError) as error:
            self._logger.warning("Ignoring unreadable saved notes: %s", error)
            self._notes = []
        return self.list_notes()

    def list_notes(self) -> list[Note]:
        return list(self._notes)

    def add(self, text: str) -> Optional[Note]:
        if not text.strip():
            return None
        note = Note(text=text)
        self._notes.append(note)
        self._save()
        self._logger.info("Note added: id=%s", note.id)
        return note

    def delete(self, note_id: str) -> bool:
        remaining = [note for note in self._notes if note.id != note_id]
        if len(remaining) == len(self._notes):
            return False
        self._notes = remaining
        self._save()
        self._logger.info("Note deleted: id=%s", note_id)
        return True

    def toggle_realized(self, note_id: str) -> Optional[Note]:
        for index, note in enumerate(self._notes):
            if note.id == note_id:
                updated = note.toggled()
                self._notes[index] = updated
                self._save()
                return updated
        return None

    def _save(self) -> None:
        payload = json.dumps([note.to_dict() for note in self._notes])
        self._store.set(self._key, payload)

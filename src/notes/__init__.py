"""Persistent notes list backed by a key-value store."""

from .errors import NotesStorageError
from .models import Note
from .store import NOTES_STORAGE_KEY, JsonFileKeyValueStore, KeyValueStore, NotesStore

__all__ = [
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "NOTES_STORAGE_KEY",
    "Note",
    "NotesStorageError",
    "NotesStore",
]

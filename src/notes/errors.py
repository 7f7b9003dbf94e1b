class NotesStorageError(Exception):
    """Raised when the notes key-value store cannot be read or written."""

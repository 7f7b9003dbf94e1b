"""Note entry model and its JSON representation."""

from __future__ import annotations

import datetime as dt
import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional


def _now() -> dt.datetime:
    return dt.datetime.now().astimezone()


@dataclass(frozen=True)
class Note:
    """One saved note with a completion flag and its creation time."""
    text: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    realized: bool = False
    timestamp: dt.datetime = field(default_factory=_now)

    def days_ago(self, now: Optional[dt.datetime] = None) -> int:
        """Whole days since the note was added, never negative."""
        current = now or _now()
        return max(0, (current - self.timestamp).days)

    def toggled(self) -> "Note":
        return replace(self, realized=not self.realized)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "realized": self.realized,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Note":
        text = raw.get("text")
        if not isinstance(text, str):
            raise ValueError("note text must be a string")
        note_id = raw.get("id")
        if not isinstance(note_id, str) or not note_id:
            raise ValueError("note id must be a non-empty string")

        timestamp = dt.datetime.fromisoformat(str(raw["timestamp"]))
        if timestamp.tzinfo is None:
            timestamp = timestamp.astimezone()
        return cls(
            text=text,
            id=note_id,
            realized=bool(raw.get("realized", False)),
            timestamp=timestamp,
        )

"""Core data models for the voice journal.

Entries serialize to the same JSON shape the browser client stored
(camelCase timestamps), so persisted blobs move between the two unchanged.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

DEFAULT_MOOD = "neutral"
CURRENT_VERSION = 1


class CommandKind(StrEnum):
    """Directives the parser can extract from spoken text."""

    NEW_ENTRY = "NEW_ENTRY"
    TODAY_ENTRY = "TODAY_ENTRY"
    YESTERDAY_ENTRY = "YESTERDAY_ENTRY"
    CONTINUE_ENTRY = "CONTINUE_ENTRY"
    SET_MOOD = "SET_MOOD"
    ADD_TAG = "ADD_TAG"


@dataclass
class ParsedCommand:
    """A directive extracted from text, with the text that triggered it."""

    kind: CommandKind
    params: list[str] = field(default_factory=list)
    original_text: str = ""

    @property
    def param(self) -> str | None:
        return self.params[0] if self.params else None

    def to_dict(self) -> dict[str, Any]:
        return {"command": self.kind.value, "params": list(self.params), "originalText": self.original_text}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ParsedCommand | None:
        """Build from ``{"command": ..., "params": [...]}``; None for unknown kinds."""
        raw_kind = data.get("command") or data.get("kind")
        try:
            kind = CommandKind(str(raw_kind).upper())
        except ValueError:
            return None
        params = data.get("params") or []
        if not isinstance(params, list):
            params = [params]
        return cls(
            kind=kind,
            params=[str(p) for p in params],
            original_text=str(data.get("originalText") or data.get("original_text") or ""),
        )


@dataclass
class ParseResult:
    """Cleaned prose plus everything extracted from it.

    The transcription collaborator returns the same four fields, so this
    type doubles as the transcription result.
    """

    text: str = ""
    commands: list[ParsedCommand] = field(default_factory=list)
    mood: str | None = None
    tags: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "commands": [c.to_dict() for c in self.commands],
            "mood": self.mood,
            "tags": list(self.tags),
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ParseResult:
        """Normalize a loosely-typed payload; missing fields become empty."""
        commands: list[ParsedCommand] = []
        for raw in data.get("commands") or []:
            if isinstance(raw, ParsedCommand):
                commands.append(raw)
            elif isinstance(raw, Mapping):
                command = ParsedCommand.from_dict(raw)
                if command is not None:
                    commands.append(command)
        tags = data.get("tags") or []
        return cls(
            text=str(data.get("text") or ""),
            commands=commands,
            mood=data.get("mood") or None,
            tags=[str(t) for t in tags] if isinstance(tags, list) else [],
        )


TranscriptionResult = ParseResult


@dataclass
class Paragraph:
    """One appended chunk of entry text."""

    id: str
    text: str
    timestamp: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "text": self.text, "timestamp": self.timestamp}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Paragraph:
        return cls(id=str(data["id"]), text=str(data.get("text", "")), timestamp=str(data.get("timestamp", "")))


@dataclass
class JournalEntry:
    """A journal record for one calendar date.

    Attributes:
        id: Stable identifier, ``entry_<YYYYMMDD>_<n>``.
        date: ``YYYY-MM-DD``.
        title: Free text, defaults to "Journal Entry for <date>".
        content: Paragraphs in the order they were spoken.
        mood: Mood key; open vocabulary, ``neutral`` by default.
        tags: Unique lowercase tags.
        created_at: ISO-8601 creation timestamp.
        updated_at: ISO-8601 timestamp of the last mutation.
    """

    id: str
    date: str
    title: str = ""
    content: list[Paragraph] = field(default_factory=list)
    mood: str = DEFAULT_MOOD
    tags: list[str] = field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""

    @property
    def text(self) -> str:
        """All paragraph text joined by blank lines."""
        return "\n\n".join(p.text for p in self.content)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date,
            "title": self.title,
            "content": [p.to_dict() for p in self.content],
            "mood": self.mood,
            "tags": list(self.tags),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> JournalEntry:
        """Inverse of ``to_dict``. Raises KeyError/TypeError on malformed data."""
        content = data.get("content") or []
        return cls(
            id=str(data["id"]),
            date=str(data["date"]),
            title=str(data.get("title") or ""),
            content=[Paragraph.from_dict(p) for p in content],
            mood=str(data.get("mood") or DEFAULT_MOOD),
            tags=[str(t) for t in data.get("tags") or []],
            created_at=str(data.get("createdAt") or data.get("created_at") or ""),
            updated_at=str(data.get("updatedAt") or data.get("updated_at") or ""),
        )

    def __repr__(self) -> str:
        return f"JournalEntry(id='{self.id}', date='{self.date}', mood='{self.mood}', paragraphs={len(self.content)})"


@dataclass
class StoreState:
    """Everything the entry store persists."""

    entries: list[JournalEntry] = field(default_factory=list)
    active_entry_id: str | None = None
    version: int = CURRENT_VERSION

    def copy(self) -> StoreState:
        return copy.deepcopy(self)

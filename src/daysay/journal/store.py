"""EntryStore — the canonical collection of journal entries.

Owns the entries, the active-entry pointer and the schema version. Every
mutation runs to completion synchronously and persists before returning,
so a read after a write always sees what was written to storage.

Persistence is injected (``EntryPersistence``). ``KeyValueEntryPersistence``
adapts any ``KeyValueStore`` by writing three keys: the entries as a JSON
array, the active id, and the version.
"""

from __future__ import annotations

import copy
import json
import random
from collections.abc import Callable, Mapping
from datetime import date, datetime, timedelta
from typing import Any, Protocol, runtime_checkable

from loguru import logger

from daysay.core.events import STORE_CHANGED, Event, EventBus
from daysay.core.storage import KeyValueStore
from daysay.core.utils.dates import format_date, parse_date

from .config import StorageKeys
from .models import CURRENT_VERSION, DEFAULT_MOOD, JournalEntry, Paragraph, StoreState

# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------


@runtime_checkable
class EntryPersistence(Protocol):
    """Contract for whatever holds the store between sessions."""

    def load(self) -> StoreState | None:
        """Return the stored state, or None when nothing usable is stored."""
        ...

    def save(self, state: StoreState) -> None:
        """Write the full state."""
        ...


class KeyValueEntryPersistence:
    """Persist a StoreState as three string values in a key-value store.

    Absent keys and malformed JSON both read as "no prior state"; the
    latter is logged. Storage backend errors propagate to the caller.
    """

    def __init__(self, storage: KeyValueStore, keys: StorageKeys | None = None):
        self.storage = storage
        self.keys = keys or StorageKeys()

    def load(self) -> StoreState | None:
        raw_entries = self.storage.get_item(self.keys.entries)
        if not raw_entries:
            return None

        try:
            data = json.loads(raw_entries)
        except json.JSONDecodeError as e:
            logger.error(f"Error parsing stored journal entries: {e}")
            return None
        if not isinstance(data, list) or not data:
            return None

        try:
            entries = [JournalEntry.from_dict(item) for item in data]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.error(f"Stored journal entries are malformed: {e}")
            return None

        active_entry_id = self.storage.get_item(self.keys.active_entry_id) or None
        version = self.storage.get_number_item(self.keys.version, default=0)
        logger.debug(f"Loaded {len(entries)} journal entries (version {version}, active {active_entry_id})")
        return StoreState(entries=entries, active_entry_id=active_entry_id, version=version)

    def save(self, state: StoreState) -> None:
        self.storage.set_item(self.keys.entries, json.dumps([e.to_dict() for e in state.entries]))
        self.storage.set_item(self.keys.active_entry_id, state.active_entry_id or "")
        self.storage.set_number_item(self.keys.version, state.version)


# ---------------------------------------------------------------------------
# EntryStore
# ---------------------------------------------------------------------------


class EntryStore:
    """In-memory, synchronously-mutated collection of journal entries.

    Lifecycle is the caller's: construct, call ``initialize()`` once
    persistence is available, then mutate. After initialization exactly
    one entry is active and at least one entry exists.

    Args:
        persistence: Where state is loaded from and saved to. None keeps the
            store purely in memory.
        bus: Receives a ``journal.store.changed`` event after every persist.
        today: Clock for calendar dates.
        now: Clock for timestamps.
        rng: Source of the random part of entry ids.
    """

    def __init__(
        self,
        persistence: EntryPersistence | None = None,
        *,
        bus: EventBus | None = None,
        today: Callable[[], date] | None = None,
        now: Callable[[], datetime] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._persistence = persistence
        self._bus = bus
        self._today = today or date.today
        self._now = now or datetime.now
        self._rng = rng or random.Random()
        self._state = StoreState(entries=[], active_entry_id=None, version=CURRENT_VERSION)
        self._initialized = False

    # -- Lifecycle ------------------------------------------------------------

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> None:
        """Load persisted state, or start with a default entry for today.

        Safe to call repeatedly; each call re-reads persistence.
        """
        if self._persistence is None:
            if not self._state.entries:
                self._state = self._default_state()
            self._initialized = True
            return

        try:
            stored = self._persistence.load()
        except Exception as e:
            logger.error(f"Error initializing journal from storage: {e}")
            self._state = self._default_state()
            self._initialized = True
            return

        if stored is not None and stored.entries:
            ids = {entry.id for entry in stored.entries}
            active_entry_id = stored.active_entry_id if stored.active_entry_id in ids else stored.entries[0].id
            self._state = StoreState(entries=stored.entries, active_entry_id=active_entry_id, version=CURRENT_VERSION)
            self._initialized = True
            if stored.version < CURRENT_VERSION:
                logger.info(f"Upgrading journal schema version {stored.version} -> {CURRENT_VERSION}")
                self.persist()
        else:
            self._state = self._default_state()
            self._initialized = True
            self.persist()

    def persist(self) -> None:
        """Write the current state. Storage failures are logged, never raised."""
        if self._persistence is not None:
            try:
                self._persistence.save(self._state)
            except Exception as e:
                logger.error(f"Error persisting journal entries: {e}")
        if self._bus is not None:
            self._bus.emit_sync(
                Event(
                    name=STORE_CHANGED,
                    payload={"entries": len(self._state.entries), "active_entry_id": self._state.active_entry_id},
                    source="journal.store",
                )
            )

    # -- Snapshot access ------------------------------------------------------

    @property
    def state(self) -> StoreState:
        """A deep copy of the current state."""
        return self._state.copy()

    @property
    def entries(self) -> list[JournalEntry]:
        return copy.deepcopy(self._state.entries)

    @property
    def active_entry_id(self) -> str | None:
        return self._state.active_entry_id

    @property
    def version(self) -> int:
        return self._state.version

    def today_string(self) -> str:
        return format_date(self._today())

    # -- Entry lifecycle ------------------------------------------------------

    def add_entry(self, entry_date: str | date | None = None, title: str | None = None) -> str:
        """Create an entry for *entry_date* (default today) and make it active.

        If an entry for that date already exists it becomes active instead
        and no entry is created.

        Returns:
            The id of the now-active entry.
        """
        date_str = self._date_string(entry_date)
        existing = self._find_by_date(date_str)
        if existing is not None:
            self._state.active_entry_id = existing.id
        else:
            entry = self._new_entry(date_str, title)
            self._state.entries.append(entry)
            self._state.active_entry_id = entry.id
            logger.debug(f"Created journal entry {entry.id} for {date_str}")

        self.persist()
        return self._state.active_entry_id

    def add_today_entry(self) -> str:
        return self.add_entry()

    def add_yesterday_entry(self) -> str:
        return self.add_entry(self._today() - timedelta(days=1))

    def delete_entry(self, entry_id: str) -> None:
        """Remove an entry, keeping at least one entry and one active entry.

        Persists even when *entry_id* is unknown.
        """
        index = next((i for i, e in enumerate(self._state.entries) if e.id == entry_id), None)
        if index is not None:
            del self._state.entries[index]
            if not self._state.entries:
                entry = self._default_entry()
                self._state.entries.append(entry)
                self._state.active_entry_id = entry.id
            elif self._state.active_entry_id == entry_id:
                latest = max(self._state.entries, key=lambda e: parse_date(e.date) or date.min)
                self._state.active_entry_id = latest.id
            logger.debug(f"Deleted journal entry {entry_id}")

        self.persist()

    def set_active_entry(self, entry_id: str) -> None:
        """Point the active entry at *entry_id*; unknown ids are ignored (but still persist)."""
        if any(e.id == entry_id for e in self._state.entries):
            self._state.active_entry_id = entry_id
        self.persist()

    # -- Content --------------------------------------------------------------

    def add_content(self, text: str, entry_id: str | None = None) -> None:
        """Append a paragraph to the target entry (default: active entry)."""
        if not isinstance(text, str) or not text.strip():
            return

        entry = self._target(entry_id)
        if entry is not None:
            paragraph_id = self._paragraph_id({p.id for p in entry.content})
            entry.content.append(Paragraph(id=paragraph_id, text=text, timestamp=self._timestamp()))
            self._touch(entry)
        self.persist()

    def update_entry_content(
        self,
        paragraphs: list[Paragraph | Mapping[str, Any] | str],
        entry_id: str | None = None,
    ) -> None:
        """Replace the target entry's content wholesale. Non-lists are ignored."""
        if not isinstance(paragraphs, list):
            return

        entry = self._target(entry_id)
        if entry is not None:
            entry.content = self._coerce_paragraphs(paragraphs)
            self._touch(entry)
        self.persist()

    # -- Field setters --------------------------------------------------------

    def set_entry_mood(self, mood: str, entry_id: str | None = None) -> None:
        if not isinstance(mood, str) or not mood.strip():
            return

        entry = self._target(entry_id)
        if entry is not None:
            entry.mood = mood.strip()
            self._touch(entry)
        self.persist()

    def set_entry_title(self, title: str, entry_id: str | None = None) -> None:
        if not isinstance(title, str) or not title.strip():
            return

        entry = self._target(entry_id)
        if entry is not None:
            entry.title = title.strip()
            self._touch(entry)
        self.persist()

    def add_entry_tag(self, tag: str, entry_id: str | None = None) -> None:
        """Add a tag (trimmed, lowercased). Adding a present tag changes nothing."""
        tag = _normalize_tag(tag)
        if not tag:
            return

        entry = self._target(entry_id)
        if entry is not None and tag not in entry.tags:
            entry.tags.append(tag)
            self._touch(entry)
        self.persist()

    def remove_entry_tag(self, tag: str, entry_id: str | None = None) -> None:
        tag = _normalize_tag(tag)
        entry = self._target(entry_id)
        if entry is not None:
            entry.tags = [t for t in entry.tags if t != tag]
            self._touch(entry)
        self.persist()

    def set_entry_tags(self, tags: list[str] | tuple[str, ...], entry_id: str | None = None) -> None:
        """Replace all tags; duplicates and blanks are dropped."""
        if not isinstance(tags, (list, tuple)):
            return

        entry = self._target(entry_id)
        if entry is not None:
            entry.tags = list(dict.fromkeys(t for t in (_normalize_tag(tag) for tag in tags) if t))
            self._touch(entry)
        self.persist()

    # -- Queries --------------------------------------------------------------

    def get_entry_by_id(self, entry_id: str) -> JournalEntry | None:
        entry = next((e for e in self._state.entries if e.id == entry_id), None)
        return copy.deepcopy(entry)

    def get_entry_by_date(self, entry_date: str | date) -> JournalEntry | None:
        return copy.deepcopy(self._find_by_date(self._date_string(entry_date)))

    def get_entries_by_date_range(self, start: str | date, end: str | date) -> list[JournalEntry]:
        """Entries dated between *start* and *end*, both inclusive."""
        start_date, end_date = parse_date(start), parse_date(end)
        if start_date is None or end_date is None:
            return []
        matches = []
        for entry in self._state.entries:
            entry_date = parse_date(entry.date)
            if entry_date is not None and start_date <= entry_date <= end_date:
                matches.append(entry)
        return copy.deepcopy(matches)

    def get_entries_by_mood(self, mood: str) -> list[JournalEntry]:
        return copy.deepcopy([e for e in self._state.entries if e.mood == mood])

    def get_entries_by_tag(self, tag: str) -> list[JournalEntry]:
        tag = _normalize_tag(tag)
        return copy.deepcopy([e for e in self._state.entries if tag in e.tags])

    # -- Internals ------------------------------------------------------------

    def _timestamp(self) -> str:
        return self._now().isoformat(timespec="milliseconds")

    def _date_string(self, value: str | date | None) -> str:
        if value is None or value == "":
            return format_date(self._today())
        if isinstance(value, date):
            return format_date(value)
        return str(value)

    def _find_by_date(self, date_str: str) -> JournalEntry | None:
        return next((e for e in self._state.entries if e.date == date_str), None)

    def _target(self, entry_id: str | None) -> JournalEntry | None:
        target_id = entry_id or self._state.active_entry_id
        if target_id is None:
            return None
        return next((e for e in self._state.entries if e.id == target_id), None)

    def _touch(self, entry: JournalEntry) -> None:
        entry.updated_at = self._timestamp()

    def _generate_entry_id(self, date_str: str) -> str:
        existing = {e.id for e in self._state.entries}
        compact = date_str.replace("-", "")
        upper = 1000
        while True:
            for _ in range(upper):
                candidate = f"entry_{compact}_{self._rng.randrange(upper)}"
                if candidate not in existing:
                    return candidate
            upper *= 10

    def _paragraph_id(self, taken: set[str]) -> str:
        base = f"p_{int(self._now().timestamp() * 1000)}"
        candidate, n = base, 1
        while candidate in taken:
            candidate = f"{base}_{n}"
            n += 1
        return candidate

    def _coerce_paragraphs(self, items: list[Paragraph | Mapping[str, Any] | str]) -> list[Paragraph]:
        paragraphs: list[Paragraph] = []
        seen: set[str] = set()
        for item in items:
            if isinstance(item, Paragraph):
                paragraph = copy.copy(item)
            elif isinstance(item, Mapping) and "id" in item:
                paragraph = Paragraph.from_dict(item)
            elif isinstance(item, Mapping):
                paragraph = Paragraph(id="", text=str(item.get("text", "")), timestamp=str(item.get("timestamp", "")))
            elif isinstance(item, str):
                paragraph = Paragraph(id="", text=item, timestamp="")
            else:
                continue
            if not paragraph.id or paragraph.id in seen:
                paragraph.id = self._paragraph_id(seen)
            if not paragraph.timestamp:
                paragraph.timestamp = self._timestamp()
            seen.add(paragraph.id)
            paragraphs.append(paragraph)
        return paragraphs

    def _new_entry(self, date_str: str, title: str | None = None) -> JournalEntry:
        now = self._timestamp()
        return JournalEntry(
            id=self._generate_entry_id(date_str),
            date=date_str,
            title=title or f"Journal Entry for {date_str}",
            content=[],
            mood=DEFAULT_MOOD,
            tags=[],
            created_at=now,
            updated_at=now,
        )

    def _default_entry(self) -> JournalEntry:
        return self._new_entry(format_date(self._today()))

    def _default_state(self) -> StoreState:
        entry = self._default_entry()
        return StoreState(entries=[entry], active_entry_id=entry.id, version=CURRENT_VERSION)


def _normalize_tag(tag: Any) -> str:
    if not isinstance(tag, str):
        return ""
    return tag.strip().lower()

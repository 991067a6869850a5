"""Read-only projections over the entry store.

Recomputed on every call from the store's current snapshot; nothing here
is cached or becomes a source of truth.
"""

from __future__ import annotations

from datetime import date

from daysay.core.utils.dates import parse_date

from .models import JournalEntry, Paragraph
from .store import EntryStore


def entries_by_date(store: EntryStore) -> list[JournalEntry]:
    """All entries, newest date first. Entries with unparseable dates sort last."""
    return sorted(store.entries, key=lambda e: parse_date(e.date) or date.min, reverse=True)


def active_entry(store: EntryStore) -> JournalEntry | None:
    active_id = store.active_entry_id
    if not active_id:
        return None
    return store.get_entry_by_id(active_id)


def active_entry_content(store: EntryStore) -> list[Paragraph]:
    entry = active_entry(store)
    return entry.content if entry is not None else []


def all_tags(store: EntryStore) -> list[str]:
    """Every tag in use, in first-seen order."""
    tags: dict[str, None] = {}
    for entry in store.entries:
        for tag in entry.tags:
            tags.setdefault(tag, None)
    return list(tags)


def all_moods(store: EntryStore) -> list[str]:
    """Every mood in use, in first-seen order."""
    moods: dict[str, None] = {}
    for entry in store.entries:
        if entry.mood:
            moods.setdefault(entry.mood, None)
    return list(moods)


def mood_counts(store: EntryStore) -> dict[str, int]:
    counts: dict[str, int] = {}
    for entry in store.entries:
        if entry.mood:
            counts[entry.mood] = counts.get(entry.mood, 0) + 1
    return counts

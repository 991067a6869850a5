"""Tests for daysay.journal.views."""

from daysay.journal.store import EntryStore
from daysay.journal.views import active_entry, active_entry_content, all_moods, all_tags, entries_by_date, mood_counts


def test_entries_by_date_newest_first(make_store):
    store = make_store()
    store.add_entry("2024-01-01")
    store.add_entry("2024-06-01")
    assert [e.date for e in entries_by_date(store)] == ["2025-05-10", "2024-06-01", "2024-01-01"]


def test_active_entry_tracks_store(make_store):
    store = make_store()
    entry_id = store.add_entry("2024-01-01")
    assert active_entry(store).id == entry_id

    store.add_content("hello")
    assert [p.text for p in active_entry_content(store)] == ["hello"]


def test_active_entry_before_initialize(today):
    store = EntryStore(today=lambda: today)
    assert active_entry(store) is None
    assert active_entry_content(store) == []


def test_tags_and_moods_first_seen_order(make_store):
    store = make_store()
    store.add_entry_tag("work")
    store.set_entry_mood("happy")
    store.add_entry("2024-01-01")
    store.add_entry_tag("family")
    store.add_entry_tag("work")
    store.set_entry_mood("tired")
    store.add_entry("2024-01-02")

    assert all_tags(store) == ["work", "family"]
    assert all_moods(store) == ["happy", "tired", "neutral"]
    assert mood_counts(store) == {"happy": 1, "tired": 1, "neutral": 1}


def test_views_recompute_on_read(make_store):
    store = make_store()
    assert all_tags(store) == []
    store.add_entry_tag("later")
    assert all_tags(store) == ["later"]

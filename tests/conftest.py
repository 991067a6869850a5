"""Shared test fixtures for daysay."""

import os
import random
import tempfile
from datetime import date, datetime

import pytest

TODAY = date(2025, 5, 10)


@pytest.fixture
def tmp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as d:
        yield d


@pytest.fixture
def tmp_config_file(tmp_dir):
    """Create a temporary YAML config file."""
    import yaml

    config_data = {
        "paths": {
            "data_dir": os.path.join(tmp_dir, "data"),
            "journal_dir": os.path.join(tmp_dir, "journal"),
        },
        "sharing": {
            "attribution": "via tests",
        },
    }
    config_path = os.path.join(tmp_dir, "config.yaml")
    with open(config_path, "w") as f:
        yaml.dump(config_data, f)
    return config_path


class TickingNow:
    """A ``datetime.now`` stand-in that advances one millisecond per call."""

    def __init__(self, start: datetime | None = None):
        self.current = start or datetime(2025, 5, 10, 9, 0, 0)
        self.calls = 0

    def __call__(self) -> datetime:
        from datetime import timedelta

        value = self.current + timedelta(milliseconds=self.calls)
        self.calls += 1
        return value


class InstantClock:
    """A progress clock that never really waits."""

    def __init__(self):
        self.sleeps: list[float] = []

    async def sleep(self, seconds: float) -> None:
        import asyncio

        self.sleeps.append(seconds)
        await asyncio.sleep(0)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def make_store():
    """Factory for EntryStores with a fixed calendar and deterministic ids."""
    from daysay.core.storage import MemoryStorage
    from daysay.journal.store import EntryStore, KeyValueEntryPersistence

    def _make(storage=None, *, today=TODAY, seed=7, initialize=True, **kwargs):
        storage = storage if storage is not None else MemoryStorage()
        store = EntryStore(
            KeyValueEntryPersistence(storage),
            today=lambda: today,
            now=TickingNow(),
            rng=random.Random(seed),
            **kwargs,
        )
        if initialize:
            store.initialize()
        return store

    return _make


@pytest.fixture
def instant_clock():
    return InstantClock()

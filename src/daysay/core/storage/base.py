"""
Abstract base class for key-value storage backends.

The journal persists its state as a handful of string values under
well-known keys, the same shape as browser ``localStorage``. Backends
only need get/set/remove semantics over strings.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator

from daysay.core.exceptions import StorageError, StoragePermissionError

__all__ = [
    "KeyValueStore",
    "StorageError",
    "StoragePermissionError",
]


class KeyValueStore(ABC):
    """Abstract base class for string key-value storage."""

    def __init__(self, **config):
        self.config = config

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Return the stored string, or None when the key is absent."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store *value* under *key*, replacing any previous value."""

    @abstractmethod
    def remove_item(self, key: str) -> bool:
        """Delete a key. Returns True if deleted, False if it didn't exist."""

    @abstractmethod
    def keys(self, prefix: str = "") -> Iterator[str]:
        """Iterate stored keys with optional prefix filter."""

    def contains(self, key: str) -> bool:
        return self.get_item(key) is not None

    def set_number_item(self, key: str, value: int) -> None:
        """Store an integer as its decimal string form."""
        self.set_item(key, str(int(value)))

    def get_number_item(self, key: str, default: int = 0) -> int:
        """Read an integer stored with ``set_number_item``; unparseable values yield *default*."""
        raw = self.get_item(key)
        if raw is None or raw.strip() == "":
            return default
        try:
            return int(raw.strip())
        except ValueError:
            return default

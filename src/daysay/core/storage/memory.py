"""In-memory key-value backend, for tests and ephemeral sessions."""

from collections.abc import Iterator

from .base import KeyValueStore


class MemoryStorage(KeyValueStore):
    """Dict-backed key-value storage. Nothing survives the process."""

    def __init__(self, initial: dict[str, str] | None = None, **config):
        super().__init__(**config)
        self._data: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove_item(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def keys(self, prefix: str = "") -> Iterator[str]:
        for key in list(self._data):
            if not prefix or key.startswith(prefix):
                yield key

    def snapshot(self) -> dict[str, str]:
        """Return a copy of every stored key/value pair."""
        return dict(self._data)

"""
Local filesystem key-value backend.

Each key is stored as one UTF-8 text file under ``base_path``. Writes go
through a temporary file and an atomic rename so a crash mid-write never
leaves a truncated value behind.
"""

import os
import tempfile
from collections.abc import Iterator
from pathlib import Path

from loguru import logger

from .base import KeyValueStore, StorageError, StoragePermissionError

_VALUE_SUFFIX = ".txt"


class LocalStorage(KeyValueStore):
    """Local filesystem key-value storage."""

    def __init__(self, base_path: str = "~/.daysay-data/journal", **config):
        super().__init__(**config)
        self.base_path = Path(base_path).expanduser().resolve()
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _get_full_path(self, key: str) -> Path:
        """Resolve a storage key to an absolute path under ``base_path``.

        Rejects unsafe keys (absolute paths, traversal, empty keys, and
        backslash-delimited paths) to prevent writes outside ``base_path``.
        """
        raw_key = key.strip()
        if not raw_key:
            raise StoragePermissionError("Storage key cannot be empty.")
        if "\x00" in raw_key:
            raise StoragePermissionError("Storage key cannot contain null bytes.")
        if "\\" in raw_key:
            raise StoragePermissionError("Storage key cannot contain backslashes. Use '/' separators.")

        key_path = Path(raw_key)
        if key_path.is_absolute() or raw_key.startswith("~"):
            raise StoragePermissionError(f"Unsafe storage key '{key}': absolute paths are not allowed.")

        full_path = (self.base_path / (raw_key + _VALUE_SUFFIX)).resolve()
        try:
            full_path.relative_to(self.base_path)
        except ValueError as e:
            raise StoragePermissionError(f"Unsafe storage key '{key}': path traversal is not allowed.") from e
        return full_path

    def get_item(self, key: str) -> str | None:
        path = self._get_full_path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except PermissionError as e:
            raise StoragePermissionError(f"Cannot read {path}: {e}") from e
        except OSError as e:
            raise StorageError(f"Cannot read {path}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        path = self._get_full_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, path)
        except PermissionError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise StoragePermissionError(f"Cannot write to {path}: {e}") from e
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise StorageError(f"Cannot write to {path}: {e}") from e
        logger.debug(f"Stored {len(value)} chars under '{key}'")

    def remove_item(self, key: str) -> bool:
        path = self._get_full_path(key)
        if not path.exists():
            return False
        path.unlink()
        return True

    def keys(self, prefix: str = "") -> Iterator[str]:
        base_len = len(str(self.base_path)) + 1
        for root, _dirs, files in os.walk(self.base_path):
            for file in sorted(files):
                if not file.endswith(_VALUE_SUFFIX) or file.startswith("."):
                    continue
                key = str(Path(root) / file)[base_len : -len(_VALUE_SUFFIX)]
                if prefix and not key.startswith(prefix):
                    continue
                yield key

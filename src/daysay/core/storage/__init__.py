"""
Storage backends for daysay.

Synchronous string key-value stores: the journal writes its whole state
on every mutation and reads it back once at startup.
"""

from .base import (
    KeyValueStore,
    StorageError,
    StoragePermissionError,
)
from .local import LocalStorage
from .memory import MemoryStorage

__all__ = [
    "KeyValueStore",
    "LocalStorage",
    "MemoryStorage",
    "StorageError",
    "StoragePermissionError",
]

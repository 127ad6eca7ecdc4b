"""Persistent key-value storage backends."""

from .kv_store import InMemoryStore, JsonFileStore, KeyValueStore, StorageError

__all__ = [
    "InMemoryStore",
    "JsonFileStore",
    "KeyValueStore",
    "StorageError",
]

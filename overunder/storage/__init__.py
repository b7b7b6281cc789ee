"""Key-value persistence stores."""

from .kv_store import (
    JsonFileStore,
    KeyValueStore,
    MemoryStore,
    SqliteStore,
    create_store,
)

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "SqliteStore",
    "create_store",
]

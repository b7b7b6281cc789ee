"""Durable key-value stores holding string values.

All stores share the get/set/remove contract of a browser-style local
storage: values are opaque strings (callers serialize JSON themselves),
``get`` returns None for missing keys and ``remove`` is a no-op when the
key is absent.
"""
import json
import os
import sqlite3
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Optional

from overunder.errors import StorageError
from overunder.settings import Settings
from overunder.utils.logger import get_logger

logger = get_logger(__name__)


class KeyValueStore(ABC):
    """Abstract string key-value store"""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value or None

        Raises:
            StorageError: The store could not be read
        """

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one

        Raises:
            StorageError: The value could not be written
        """

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete a key if present"""


class MemoryStore(KeyValueStore):
    """Process-local store, mostly for tests and throwaway sessions."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore(KeyValueStore):
    """Key-value store backed by a single JSON object on disk

    The whole file is rewritten on each ``set``/``remove`` through a
    temporary file and an atomic rename, so a crash never leaves a
    half-written file behind.
    """

    def __init__(self, file_path: str):
        """Initialize the store

        Args:
            file_path: JSON file path; parent directories are created
        """
        self.file_path = file_path
        parent = os.path.dirname(os.path.abspath(file_path))
        os.makedirs(parent, exist_ok=True)

    def _load(self) -> dict[str, str]:
        if not os.path.exists(self.file_path):
            return {}
        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise StorageError(f"Failed to read {self.file_path}: {e}") from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("Store file {} is not valid JSON: {}", self.file_path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Store file {} is not a JSON object", self.file_path)
            return {}
        return data

    def _dump(self, data: dict[str, str]) -> None:
        tmp_path = f"{self.file_path}.tmp"
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp_path, self.file_path)
        except OSError as e:
            raise StorageError(f"Failed to write {self.file_path}: {e}") from e

    def get(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._dump(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._dump(data)


class SqliteStore(KeyValueStore):
    """Key-value store backed by a single SQLite table"""

    def __init__(self, db_path: str):
        """Initialize the store and create its table

        Args:
            db_path: SQLite database file path
        """
        self.db_path = db_path
        parent = os.path.dirname(os.path.abspath(db_path))
        os.makedirs(parent, exist_ok=True)
        self.init_tables()

    @contextmanager
    def _get_connection(self):
        """Connection context manager, commits on success"""
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open {self.db_path}: {e}") from e
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"SQLite error on {self.db_path}: {e}") from e
        finally:
            conn.close()

    def init_tables(self) -> None:
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)

    def get(self, key: str) -> Optional[str]:
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT value FROM kv_store WHERE key = ?", (key,)
            ).fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        with self._get_connection() as conn:
            conn.execute(
                """
                INSERT INTO kv_store (key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (key, value),
            )

    def remove(self, key: str) -> None:
        with self._get_connection() as conn:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))


def create_store(settings: Settings) -> KeyValueStore:
    """Build the store selected by ``settings.storage.backend``."""
    backend = settings.storage.backend.lower()
    if backend == "memory":
        return MemoryStore()
    if backend == "json":
        return JsonFileStore(settings.storage.path)
    if backend == "sqlite":
        return SqliteStore(settings.storage.path)
    raise StorageError(f"Unknown storage backend: {settings.storage.backend}")

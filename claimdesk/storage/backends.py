"""
Durable key-value storage backends.

The claim store only needs string get/set/remove by key. SQLiteStorage keeps
those pairs in a local SQLite file, no external database setup required.
MemoryStorage is the in-process stand-in used by tests.
"""

import logging
import sqlite3
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Optional, Union

logger = logging.getLogger(__name__)


class KeyValueStorage(ABC):
    """Synchronous string key-value storage."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key is absent."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove a key; absent keys are ignored."""


class MemoryStorage(KeyValueStorage):
    """Dict-backed storage that lives as long as the object."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._items


class SQLiteStorage(KeyValueStorage):
    """
    SQLite-backed key-value storage.

    Usage:
        storage = SQLiteStorage(Path("data/claimdesk.db"))
        storage.set_item("claims", "[]")
        storage.get_item("claims")

    Every write commits immediately. Two processes sharing a file race with
    last-write-wins semantics.
    """

    def __init__(self, db_path: Union[str, Path]):
        """Initialize the storage file."""
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self):
        """Create the table if it doesn't exist."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            """)
            conn.commit()

    @contextmanager
    def _get_connection(self):
        """Get a database connection."""
        conn = sqlite3.connect(self.db_path)
        try:
            yield conn
        finally:
            conn.close()

    def get_item(self, key: str) -> Optional[str]:
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT value FROM kv_store WHERE key = ?",
                (key,)
            ).fetchone()
        return row[0] if row else None

    def set_item(self, key: str, value: str) -> None:
        with self._get_connection() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO kv_store (key, value) VALUES (?, ?)",
                (key, value)
            )
            conn.commit()
        logger.debug(f"Wrote {len(value)} bytes to {self.db_path} [{key}]")

    def remove_item(self, key: str) -> None:
        with self._get_connection() as conn:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            conn.commit()

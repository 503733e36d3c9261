# storefront/storage.py
import datetime
import os
import sqlite3
from typing import Dict, Optional

import pytz

from .logger import get_logger

logger = get_logger(__name__)

STORE_PATH = os.getenv("STORE_PATH", "data/storefront.sqlite3")


class StorageError(Exception):
    """Local key-value store could not be read or written."""


def now_utc_iso() -> str:
    return datetime.datetime.now(tz=pytz.UTC).isoformat()


class KeyValueStore:
    """
    Single-table SQLite key-value store. Each `set` overwrites the whole
    value for its key.
    """

    def __init__(self, path: str = STORE_PATH):
        self.path = path
        self._ensured = False

    def _connect(self) -> sqlite3.Connection:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        return sqlite3.connect(self.path)

    def ensure_db(self) -> None:
        if self._ensured:
            return
        try:
            with self._connect() as con:
                con.execute(
                    """
                    CREATE TABLE IF NOT EXISTS kv (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL,
                        updated_at TEXT
                    )
                """
                )
                con.commit()
        except (sqlite3.Error, OSError) as e:
            raise StorageError(f"Cannot initialise store at {self.path}: {e}") from e
        self._ensured = True

    def get(self, key: str) -> Optional[str]:
        self.ensure_db()
        try:
            with self._connect() as con:
                row = con.execute("SELECT value FROM kv WHERE key=?", (key,)).fetchone()
        except (sqlite3.Error, OSError) as e:
            raise StorageError(f"Cannot read key {key!r}: {e}") from e
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        self.ensure_db()
        try:
            with self._connect() as con:
                con.execute(
                    """
                    INSERT INTO kv (key, value, updated_at)
                    VALUES (?,?,?)
                    ON CONFLICT(key) DO UPDATE SET
                        value=excluded.value,
                        updated_at=excluded.updated_at
                """,
                    (key, value, now_utc_iso()),
                )
                con.commit()
        except (sqlite3.Error, OSError) as e:
            raise StorageError(f"Cannot write key {key!r}: {e}") from e
        logger.debug("Stored %d bytes under %s", len(value), key)

    def delete(self, key: str) -> None:
        self.ensure_db()
        try:
            with self._connect() as con:
                con.execute("DELETE FROM kv WHERE key=?", (key,))
                con.commit()
        except (sqlite3.Error, OSError) as e:
            raise StorageError(f"Cannot delete key {key!r}: {e}") from e


class MemoryStore:
    """Dict-backed store with the same interface, for embedding and tests."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)

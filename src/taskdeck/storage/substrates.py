# src/taskdeck/storage/substrates.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from pathlib import Path

from ..errors import PersistenceFault

logger = logging.getLogger(__name__)


class SqliteSubstrate:
    """
    Durable key-value substrate backed by a single SQLite table.

    Values are opaque strings (PersistentStore does the JSON work).

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "taskdeck.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("SqliteSubstrate ready db=%s", self._db_path)

    @property
    def db_path(self) -> Path:
        return self._db_path

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    # ---- substrate API ----

    def get_item(self, key: str) -> str | None:
        try:
            conn = self._get_conn()
            try:
                row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
                return None if row is None else str(row[0])
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise PersistenceFault(f"read failed for key {key!r}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        try:
            conn = self._get_conn()
            try:
                conn.execute(
                    """
                    INSERT INTO kv(key, value) VALUES (?, ?)
                    ON CONFLICT(key) DO UPDATE SET value = excluded.value
                    """,
                    (key, value),
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise PersistenceFault(f"write failed for key {key!r}: {e}") from e

    def remove_item(self, key: str) -> None:
        try:
            conn = self._get_conn()
            try:
                conn.execute("DELETE FROM kv WHERE key = ?", (key,))
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise PersistenceFault(f"remove failed for key {key!r}: {e}") from e


class MemorySubstrate:
    """
    In-process substrate for tests and throwaway sessions.

    quota_bytes: total size (keys + values, UTF-8) above which writes fail,
                 like a browser's storage quota. None = unlimited.
    enabled: when False every call fails, like storage disabled by the user.
    """

    def __init__(self, *, quota_bytes: int | None = None, enabled: bool = True) -> None:
        self.items: dict[str, str] = {}
        self.quota_bytes = quota_bytes
        self.enabled = enabled

    def _check_enabled(self) -> None:
        if not self.enabled:
            raise PersistenceFault("storage is disabled")

    def _size_with(self, key: str, value: str) -> int:
        total = 0
        for k, v in self.items.items():
            if k == key:
                continue
            total += len(k.encode("utf-8")) + len(v.encode("utf-8"))
        return total + len(key.encode("utf-8")) + len(value.encode("utf-8"))

    def get_item(self, key: str) -> str | None:
        self._check_enabled()
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._check_enabled()
        if self.quota_bytes is not None and self._size_with(key, value) > self.quota_bytes:
            raise PersistenceFault(f"quota exceeded writing key {key!r}")
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self._check_enabled()
        self.items.pop(key, None)

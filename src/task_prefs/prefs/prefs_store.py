# prefs/prefs_store.py

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import sqlite3
from collections.abc import AsyncIterator, Callable
from pathlib import Path

from ..core.changes import ChangeNotifier
from ..core.ports import PreferencesMapping

logger = logging.getLogger(__name__)


class PreferencesIOError(OSError):
    """Transient failure talking to the preferences database (locked, unreadable, disk I/O)."""


class SqlitePreferencesStore:
    """
    SQLite key-value store for user preferences.

    Layout:
    - one row per preference key
    - values are JSON-encoded (booleans stay booleans, enums are stored by name)

    Transactions:
    - edit() is serialized in-process by an asyncio.Lock
    - BEGIN IMMEDIATE takes the write lock up front, so another process
      cannot interleave between our read and our write
    - all SQLite work runs in a worker thread (asyncio.to_thread), so waiting
      on the write lock suspends the caller instead of the event loop

    Change notifications are in-process only: writes made by another process
    become visible on the next read but do not wake watchers here.
    """

    def __init__(self, db_path: str | Path = "preferences.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = asyncio.Lock()
        self._changes = ChangeNotifier()
        self._ensure_schema()
        logger.info("SqlitePreferencesStore ready db=%s", self._db_path)

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        # isolation_level=None: transactions are opened explicitly.
        conn = sqlite3.connect(str(self._db_path), timeout=30.0, isolation_level=None)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS preferences (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )
        finally:
            conn.close()

    @staticmethod
    def _load_rows(conn: sqlite3.Connection) -> PreferencesMapping:
        cur = conn.execute("SELECT key, value FROM preferences")
        return {str(row["key"]): json.loads(row["value"]) for row in cur.fetchall()}

    # ---- sync workers (run in a thread) ----

    def _read_sync(self) -> PreferencesMapping:
        try:
            conn = self._get_conn()
            try:
                return self._load_rows(conn)
            finally:
                conn.close()
        except sqlite3.OperationalError as e:
            raise PreferencesIOError(f"Failed to read preferences from {self._db_path}: {e}") from e

    def _edit_sync(
        self, transform: Callable[[PreferencesMapping], None]
    ) -> tuple[PreferencesMapping, PreferencesMapping]:
        try:
            conn = self._get_conn()
        except sqlite3.OperationalError as e:
            raise PreferencesIOError(f"Failed to open {self._db_path}: {e}") from e

        try:
            conn.execute("BEGIN IMMEDIATE")
            try:
                current = self._load_rows(conn)
                updated = dict(current)
                transform(updated)

                for key, value in updated.items():
                    if key in current and current[key] == value:
                        continue
                    conn.execute(
                        """
                        INSERT INTO preferences(key, value) VALUES (?, ?)
                        ON CONFLICT(key) DO UPDATE SET value = excluded.value
                        """,
                        (key, json.dumps(value, ensure_ascii=False)),
                    )
                for key in current.keys() - updated.keys():
                    conn.execute("DELETE FROM preferences WHERE key = ?", (key,))

                conn.execute("COMMIT")
            except BaseException:
                with contextlib.suppress(sqlite3.Error):
                    conn.execute("ROLLBACK")
                raise
        except sqlite3.OperationalError as e:
            raise PreferencesIOError(f"Failed to update preferences in {self._db_path}: {e}") from e
        finally:
            conn.close()
        return current, updated

    # ---- public API ----

    async def read(self) -> PreferencesMapping:
        """Snapshot of all stored entries. Raises PreferencesIOError on operational failures."""
        return await asyncio.to_thread(self._read_sync)

    def watch(self) -> AsyncIterator[int]:
        return self._changes.watch()

    async def edit(self, transform: Callable[[PreferencesMapping], None]) -> PreferencesMapping:
        """
        Transactional read-modify-write.

        transform() mutates a copy of the current entries; keys it adds or
        changes are upserted, keys it removes are deleted. Any exception
        (including from transform) rolls back and propagates.

        The transaction runs in a worker thread; transform() runs there too.
        """
        async with self._lock:
            current, updated = await asyncio.to_thread(self._edit_sync, transform)

        if updated != current:
            self._changes.notify()
            logger.debug("Preferences updated keys=%s", sorted(updated))
        return dict(updated)

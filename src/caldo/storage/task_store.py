# src/caldo/storage/task_store.py

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import sqlite3
import time
from pathlib import Path
from typing import Any

from ..board.models import Task, tasks_from_payload, tasks_to_payload
from .errors import StorageError

logger = logging.getLogger(__name__)


class SqliteTaskStore:
    """
    SQLite day-task store: one row per date key holding the whole task list as JSON.

    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Thread-safety:
    - each method opens its own SQLite connection, so the async wrappers can
      run the blocking calls in a worker thread
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._ensure_schema()
        except (OSError, sqlite3.Error) as e:
            raise StorageError(f"Cannot open task store {self._db_path}: {e}") from e
        try:
            total = self.count_days()
        except Exception:
            total = -1
        logger.info("SqliteTaskStore ready db=%s days=%s", self._db_path, total)

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS day_tasks (
                    date_key TEXT PRIMARY KEY,
                    tasks TEXT NOT NULL DEFAULT '[]',
                    updated_at REAL NOT NULL
                )
                """
            )

            # Migrations (safe): add missing columns.
            cur.execute("PRAGMA table_info(day_tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE day_tasks ADD COLUMN {name} {decl}")
                logger.info("SqliteTaskStore migration: added column %s", name)

            add_col("tasks", "TEXT NOT NULL DEFAULT '[]'")
            add_col("updated_at", "REAL NOT NULL DEFAULT 0")

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _tasks_to_str(tasks: list[Task]) -> str:
        return json.dumps(tasks_to_payload(tasks), ensure_ascii=False)

    @staticmethod
    def _str_to_payload(s: str | None) -> list[Any]:
        if not s:
            return []
        try:
            val = json.loads(s)
        except ValueError:
            logger.warning("Stored task list is not valid JSON; treating as empty.")
            return []
        return val if isinstance(val, list) else []

    # ---- blocking API ----

    def count_days(self) -> int:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT COUNT(*) FROM day_tasks")
            (n,) = cur.fetchone()
            return int(n)
        finally:
            conn.close()

    def load_sync(self, date_key: str) -> list[Task]:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT tasks FROM day_tasks WHERE date_key = ?", (date_key,))
            row = cur.fetchone()
            if row is None:
                return []
            return tasks_from_payload(self._str_to_payload(row["tasks"]))
        finally:
            conn.close()

    def save_sync(self, date_key: str, tasks: list[Task]) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO day_tasks(date_key, tasks, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(date_key) DO UPDATE SET
                    tasks = excluded.tasks,
                    updated_at = excluded.updated_at
                """,
                (date_key, self._tasks_to_str(tasks), time.time()),
            )
            conn.commit()
            logger.debug("Saved %d tasks for %s", len(tasks), date_key)
        finally:
            conn.close()

    def clear_sync(self, date_key: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM day_tasks WHERE date_key = ?", (date_key,))
            conn.commit()
            logger.debug("Cleared tasks for %s", date_key)
        finally:
            conn.close()

    # ---- DayTaskRepo ----

    async def load(self, date_key: str) -> list[Task]:
        try:
            return await asyncio.to_thread(self.load_sync, date_key)
        except sqlite3.Error as e:
            raise StorageError(f"Failed to load tasks for {date_key}: {e}", date_key=date_key) from e

    async def save(self, date_key: str, tasks: list[Task]) -> None:
        try:
            await asyncio.to_thread(self.save_sync, date_key, list(tasks))
        except sqlite3.Error as e:
            raise StorageError(f"Failed to save tasks for {date_key}: {e}", date_key=date_key) from e

    async def clear(self, date_key: str) -> None:
        try:
            await asyncio.to_thread(self.clear_sync, date_key)
        except sqlite3.Error as e:
            raise StorageError(f"Failed to clear tasks for {date_key}: {e}", date_key=date_key) from e

    async def aclose(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

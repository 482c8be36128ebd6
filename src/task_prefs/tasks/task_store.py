# tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
from collections.abc import AsyncIterator
from datetime import date
from pathlib import Path

from ..core.changes import ChangeNotifier
from .task_models import Task, TaskPriority

logger = logging.getLogger(__name__)

SAMPLE_TASKS: tuple[tuple[str, date, TaskPriority, bool], ...] = (
    ("Open codelab", date(2020, 7, 29), TaskPriority.LOW, False),
    ("Import project", date(2020, 4, 3), TaskPriority.MEDIUM, True),
    ("Check out the code", date(2020, 5, 3), TaskPriority.LOW, False),
    ("Read about DataStore", date(2020, 6, 3), TaskPriority.HIGH, False),
    ("Implement each step", date(2020, 7, 3), TaskPriority.MEDIUM, False),
    ("Understand how to use DataStore", date(2020, 4, 3), TaskPriority.HIGH, True),
    ("Understand how to migrate to DataStore", date(2020, 4, 3), TaskPriority.HIGH, False),
)


class TaskStore:
    """
    SQLite task store.

    This is the task source the view model subscribes to:
    - tasks_stream() emits the whole list on subscribe and after each change
    - list order is insertion order; filtering/sorting happens downstream

    Thread-safety:
    - each method opens its own SQLite connection
    - notifications must be triggered from the event loop thread
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._changes = ChangeNotifier()
        self._ensure_schema()
        logger.info("TaskStore ready db=%s total=%s", self._db_path, self.count_tasks())

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
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
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    deadline TEXT NOT NULL,
                    priority INTEGER NOT NULL DEFAULT 1,
                    completed INTEGER NOT NULL DEFAULT 0,
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=int(row["id"]),
            name=str(row["name"] or ""),
            deadline=date.fromisoformat(row["deadline"]),
            priority=TaskPriority.from_db(row["priority"]),
            completed=bool(row["completed"]),
        )

    # ---- public API ----

    def count_tasks(self) -> int:
        conn = self._get_conn()
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
            return int(n)
        finally:
            conn.close()

    def add_task(
        self,
        *,
        name: str,
        deadline: date,
        priority: TaskPriority = TaskPriority.MEDIUM,
        completed: bool = False,
    ) -> int:
        if not name or not name.strip():
            raise ValueError("name is required")

        now = time.time()
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO tasks(name, deadline, priority, completed, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    name.strip(),
                    deadline.isoformat(),
                    int(priority),
                    int(bool(completed)),
                    now,
                    now,
                ),
            )
            conn.commit()
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for tasks insert")
            task_id = int(rowid)
        finally:
            conn.close()

        logger.debug(
            "Task added id=%s deadline=%s priority=%s completed=%s",
            task_id,
            deadline,
            priority.name,
            completed,
        )
        self._changes.notify()
        return task_id

    def list_tasks(self) -> list[Task]:
        conn = self._get_conn()
        try:
            cur = conn.execute("SELECT * FROM tasks ORDER BY id ASC")
            return [self._row_to_task(r) for r in cur.fetchall()]
        finally:
            conn.close()

    def set_completed(self, task_id: int, completed: bool) -> bool:
        """Returns True if a task with this id exists."""
        conn = self._get_conn()
        try:
            cur = conn.execute(
                "UPDATE tasks SET completed = ?, updated_at = ? WHERE id = ?",
                (int(bool(completed)), time.time(), int(task_id)),
            )
            conn.commit()
            found = cur.rowcount == 1
        finally:
            conn.close()

        if found:
            logger.debug("Task %s completed=%s", task_id, completed)
            self._changes.notify()
        return found

    def seed_sample_tasks(self) -> int:
        """Insert the sample task list into an empty store. Returns the number of rows added."""
        if self.count_tasks() > 0:
            return 0
        for name, deadline, priority, completed in SAMPLE_TASKS:
            self.add_task(name=name, deadline=deadline, priority=priority, completed=completed)
        logger.info("Seeded %d sample tasks", len(SAMPLE_TASKS))
        return len(SAMPLE_TASKS)

    async def tasks_stream(self) -> AsyncIterator[list[Task]]:
        async for _version in self._changes.watch():
            yield self.list_tasks()

# src/taskminder/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ..errors import NotFoundError
from .task_models import NewTask, Task, TaskPriority, TaskStatus, from_epoch, to_epoch, utcnow

logger = logging.getLogger(__name__)

# Columns a partial update may touch. id / created_at are immutable.
UPDATABLE_COLUMNS = frozenset(
    {
        "title",
        "description",
        "category",
        "status",
        "priority",
        "due_date",
        "reminder_time",
        "notification_id",
    }
)

_TIMESTAMP_COLUMNS = frozenset({"due_date", "reminder_time"})


class TaskStore:
    """
    SQLite task store.

    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Timestamps are stored as UTC epoch seconds (REAL).

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("TaskStore ready db=%s total=%s", self._db_path, self.count_tasks())

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(sqlite3.DatabaseError):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    description TEXT,
                    category TEXT NOT NULL DEFAULT 'Personal',
                    status TEXT NOT NULL DEFAULT 'todo',
                    priority TEXT NOT NULL DEFAULT 'medium',
                    due_date REAL NOT NULL,
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL,
                    reminder_time REAL,
                    notification_id TEXT
                )
                """
            )

            # Migrations (safe): add missing columns.
            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("TaskStore migration: added column %s", name)

            # Databases created before reminders existed lack these.
            add_col("updated_at", "REAL NOT NULL DEFAULT 0")
            add_col("reminder_time", "REAL")
            add_col("notification_id", "TEXT")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_created ON tasks(created_at, id)")

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _to_column(name: str, value: Any) -> Any:
        if value is None:
            return None
        if name in _TIMESTAMP_COLUMNS:
            return to_epoch(value)
        if isinstance(value, (TaskStatus, TaskPriority)):
            return value.value
        return value

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        due = from_epoch(row["due_date"])
        created = from_epoch(row["created_at"])
        return Task(
            id=int(row["id"]),
            title=str(row["title"] or ""),
            description=row["description"],
            category=str(row["category"] or ""),
            status=TaskStatus.from_db(row["status"]),
            priority=TaskPriority.from_db(row["priority"]),
            due_date=due if due is not None else utcnow(),
            created_at=created if created is not None else utcnow(),
            reminder_time=from_epoch(row["reminder_time"]),
            notification_id=row["notification_id"],
        )

    # ---- public API ----

    def count_tasks(self) -> int:
        conn = self._get_conn()
        try:
            (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
            return int(n)
        finally:
            conn.close()

    def list_tasks(self) -> list[Task]:
        """All tasks in creation order."""
        conn = self._get_conn()
        try:
            rows = conn.execute("SELECT * FROM tasks ORDER BY created_at ASC, id ASC").fetchall()
            return [self._row_to_task(r) for r in rows]
        finally:
            conn.close()

    def get_task(self, task_id: int) -> Task:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (int(task_id),)).fetchone()
        finally:
            conn.close()
        if row is None:
            raise NotFoundError(task_id)
        return self._row_to_task(row)

    def add_task(self, new: NewTask, *, notification_id: str | None = None) -> Task:
        if not new.title or not new.title.strip():
            raise ValueError("title is required")

        created_at = utcnow()
        now = time.time()

        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO tasks(
                    title, description, category, status, priority,
                    due_date, created_at, updated_at, reminder_time, notification_id
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    new.title.strip(),
                    new.description,
                    new.category,
                    new.status.value,
                    new.priority.value,
                    to_epoch(new.due_date),
                    to_epoch(created_at),
                    now,
                    to_epoch(new.reminder_time),
                    notification_id,
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
            "Task added id=%s status=%s reminder=%s notification=%s",
            task_id,
            new.status.value,
            new.reminder_time,
            notification_id,
        )
        return Task(
            id=task_id,
            title=new.title.strip(),
            description=new.description,
            category=new.category,
            status=new.status,
            priority=new.priority,
            due_date=new.due_date,
            created_at=created_at,
            reminder_time=new.reminder_time,
            notification_id=notification_id,
        )

    def update_task(self, task_id: int, fields: Mapping[str, Any]) -> None:
        """
        Apply a partial update. Keys must be in UPDATABLE_COLUMNS; a None value
        clears the column. An empty mapping only checks that the task exists.
        """
        unknown = set(fields) - UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"cannot update columns: {', '.join(sorted(unknown))}")

        assignments: list[str] = []
        params: list[Any] = []
        for name, value in fields.items():
            assignments.append(f"{name} = ?")
            params.append(self._to_column(name, value))

        assignments.append("updated_at = ?")
        params.append(time.time())
        params.append(int(task_id))

        sql = f"UPDATE tasks SET {', '.join(assignments)} WHERE id = ?"

        conn = self._get_conn()
        try:
            cur = conn.execute(sql, params)
            if cur.rowcount == 0:
                raise NotFoundError(task_id)
            conn.commit()
        finally:
            conn.close()

        logger.debug("Task updated id=%s fields=%s", task_id, sorted(fields))

    def delete_task(self, task_id: int) -> None:
        conn = self._get_conn()
        try:
            cur = conn.execute("DELETE FROM tasks WHERE id = ?", (int(task_id),))
            if cur.rowcount == 0:
                raise NotFoundError(task_id)
            conn.commit()
        finally:
            conn.close()

        logger.debug("Task deleted id=%s", task_id)

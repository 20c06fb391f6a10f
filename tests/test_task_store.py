# tests/test_task_store.py

from __future__ import annotations

import sqlite3
from datetime import timedelta
from pathlib import Path

import pytest

from taskminder.errors import NotFoundError
from taskminder.tasks.task_models import NewTask, TaskPriority, TaskStatus, utcnow
from taskminder.tasks.task_store import TaskStore


def _new(title: str, **kw) -> NewTask:
    return NewTask(
        title=title,
        description=kw.get("description"),
        category=kw.get("category", "Personal"),
        status=kw.get("status", TaskStatus.TODO),
        priority=kw.get("priority", TaskPriority.MEDIUM),
        due_date=kw.get("due_date", utcnow() + timedelta(days=1)),
        reminder_time=kw.get("reminder_time"),
    )


def test_task_add_get_list_update_delete(tmp_path: Path) -> None:
    store = TaskStore(tmp_path / "tasks.sqlite3")

    first = store.add_task(_new("first"))
    second = store.add_task(
        _new("second", reminder_time=utcnow() + timedelta(hours=1)), notification_id="abc"
    )
    assert second.id > first.id
    assert [t.title for t in store.list_tasks()] == ["first", "second"]

    got = store.get_task(second.id)
    assert got.notification_id == "abc"
    assert got.reminder_time is not None
    assert abs((got.reminder_time - second.reminder_time).total_seconds()) < 1e-3

    store.update_task(second.id, {"status": TaskStatus.DONE, "reminder_time": None, "notification_id": None})
    got2 = store.get_task(second.id)
    assert got2.status == TaskStatus.DONE
    assert got2.reminder_time is None
    assert got2.notification_id is None
    assert got2.title == "second"

    store.delete_task(first.id)
    assert store.count_tasks() == 1


def test_task_store_unknown_id_raises_not_found(tmp_path: Path) -> None:
    store = TaskStore(tmp_path / "tasks.sqlite3")

    with pytest.raises(NotFoundError):
        store.get_task(7)
    with pytest.raises(NotFoundError):
        store.update_task(7, {"title": "x"})
    with pytest.raises(NotFoundError):
        store.delete_task(7)


def test_task_store_rejects_immutable_columns(tmp_path: Path) -> None:
    store = TaskStore(tmp_path / "tasks.sqlite3")
    task = store.add_task(_new("t"))

    with pytest.raises(ValueError):
        store.update_task(task.id, {"created_at": utcnow()})


def test_task_store_migrates_pre_reminder_schema(tmp_path: Path) -> None:
    db = tmp_path / "old.sqlite3"
    conn = sqlite3.connect(db)
    conn.execute(
        """
        CREATE TABLE tasks (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            description TEXT,
            category TEXT NOT NULL DEFAULT 'Personal',
            status TEXT NOT NULL DEFAULT 'todo',
            priority TEXT NOT NULL DEFAULT 'medium',
            due_date REAL NOT NULL,
            created_at REAL NOT NULL
        )
        """
    )
    conn.execute(
        "INSERT INTO tasks(title, category, status, priority, due_date, created_at) "
        "VALUES ('legacy', 'Work', 'weird', 'HIGH', 1700000000, 1690000000)"
    )
    conn.commit()
    conn.close()

    store = TaskStore(db)

    (legacy,) = store.list_tasks()
    assert legacy.reminder_time is None
    assert legacy.notification_id is None
    assert legacy.status == TaskStatus.TODO
    assert legacy.priority == TaskPriority.HIGH

    store.update_task(legacy.id, {"notification_id": "n9", "reminder_time": utcnow() + timedelta(hours=1)})
    assert store.get_task(legacy.id).notification_id == "n9"

# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest
import pytest_asyncio

from taskminder.cli.bootstrap import create_initial_state
from taskminder.core.state import AppState
from taskminder.tasks.reminders import ReminderCoordinator
from taskminder.tasks.task_api import TaskService
from taskminder.tasks.task_store import TaskStore

from .fakes import FakeNotificationScheduler, FakeTaskRepo


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskminder-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
        notifications_enabled=True,
        notification_channel_id="default",
        notification_channel_name="Default Channel",
        notification_sound="default",
        misfire_grace_seconds=60,
        default_category="Personal",
        console_enabled=False,
    )


@pytest.fixture()
def task_store(settings: SimpleNamespace) -> TaskStore:
    return TaskStore(settings.tasks_db_path)


@pytest.fixture()
def notifier() -> FakeNotificationScheduler:
    return FakeNotificationScheduler()


@pytest.fixture()
def service(task_store: TaskStore, notifier: FakeNotificationScheduler) -> TaskService:
    """
    TaskService over a real SQLite store and a fake notification scheduler.

    NOTE: the store is real because persisting notification_id together with
    reminder_time is part of what we want to test.
    """
    return TaskService(task_store, ReminderCoordinator(notifier, task_store))


@pytest.fixture()
def fake_repo() -> FakeTaskRepo:
    return FakeTaskRepo()


@pytest.fixture()
def fake_service(fake_repo: FakeTaskRepo, notifier: FakeNotificationScheduler) -> TaskService:
    return TaskService(fake_repo, ReminderCoordinator(notifier, fake_repo))


@pytest_asyncio.fixture()
async def state(settings: SimpleNamespace) -> AppState:
    """
    AppState wired by the real bootstrap (scheduler created, not started).

    Async so the APScheduler instance is created inside the test's event loop.
    """
    return create_initial_state(settings=settings)

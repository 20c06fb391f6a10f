# src/taskminder/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- performs the one-time notification setup (NotificationConfig),
- wires concrete implementations into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..notifications.events import NotificationEvents
from ..notifications.scheduler import LocalNotificationScheduler, NotificationConfig
from ..tasks.reminders import ReminderCoordinator
from ..tasks.task_api import TaskService
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    Call it from inside the running event loop: the AsyncIOScheduler binds to it.
    The notification scheduler is created but not started.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    config = NotificationConfig.from_settings(settings)
    if not config.permission_granted:
        logger.warning("Notifications disabled; tasks with reminders will be rejected.")

    events = NotificationEvents()
    scheduler = LocalNotificationScheduler(config, events)
    task_store = TaskStore(settings.tasks_db_path)
    reminders = ReminderCoordinator(scheduler, task_store)
    service = TaskService(
        task_store,
        reminders,
        default_category=str(getattr(settings, "default_category", "Personal")),
    )

    return AppState(
        settings=settings,
        task_store=task_store,
        events=events,
        scheduler=scheduler,
        reminders=reminders,
        service=service,
    )

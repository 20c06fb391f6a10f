# src/taskminder/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..notifications.events import NotificationEvents
from ..notifications.scheduler import LocalNotificationScheduler
from ..tasks.reminders import ReminderCoordinator
from ..tasks.task_api import TaskService
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    task_store: TaskStore
    events: NotificationEvents
    scheduler: LocalNotificationScheduler
    reminders: ReminderCoordinator
    service: TaskService

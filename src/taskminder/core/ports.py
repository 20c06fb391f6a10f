# src/taskminder/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage and the notification backend swappable and makes testing easier.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Awaitable, Protocol

from ..tasks.task_models import NewTask, Task


class TaskRepo(Protocol):
    def list_tasks(self) -> list[Task]: ...
    def get_task(self, task_id: int) -> Task: ...
    def add_task(self, new: NewTask, *, notification_id: str | None = None) -> Task: ...
    def update_task(self, task_id: int, fields: Mapping[str, Any]) -> None: ...
    def delete_task(self, task_id: int) -> None: ...
    def count_tasks(self) -> int: ...


class NotificationScheduler(Protocol):
    """
    Device-local notification timers.

    cancel() must be idempotent: an unknown, fired or already cancelled id is not an error.
    """

    def schedule(self, *, title: str, body: str | None, at: datetime) -> Awaitable[str]: ...

    def cancel(self, notification_id: str) -> Awaitable[None]: ...

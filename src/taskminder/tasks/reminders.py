# src/taskminder/tasks/reminders.py

from __future__ import annotations

"""
Reminder coordinator.

Keeps a task's reminder_time and notification_id consistent with the notifications
that are actually scheduled:
- create: schedule if a reminder is given
- update: replace or clear the notification when reminder_time is part of the update
- delete: cancel whatever is still scheduled

Schedule failures propagate (the caller must not commit the task change).
Cancel failures are logged and ignored: a stray notification is harmless, a blocked
update/delete is not.
"""

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from enum import Enum
from typing import Any, Final, Literal, Union

from ..core.ports import NotificationScheduler, TaskRepo
from ..errors import NotFoundError, SchedulerError, ValidationError
from .task_models import NewTask, Task, utcnow

logger = logging.getLogger(__name__)


class _Unchanged(Enum):
    TOKEN = "unchanged"


# Returned by plan_for_update when the update does not touch reminder_time.
UNCHANGED: Final = _Unchanged.TOKEN

ReminderPlan = Union[str, None, Literal[_Unchanged.TOKEN]]


class ReminderCoordinator:
    def __init__(
        self,
        scheduler: NotificationScheduler,
        task_store: TaskRepo,
        *,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._scheduler = scheduler
        self._store = task_store
        self._clock = clock

    def validate_reminder(self, reminder_time: datetime | None) -> None:
        """A reminder must be strictly after now. Clearing (None) is always valid."""
        if reminder_time is None:
            return
        if reminder_time <= self._clock():
            raise ValidationError("reminder in past")

    async def plan_for_create(self, task: NewTask) -> str | None:
        if task.reminder_time is None:
            return None
        self.validate_reminder(task.reminder_time)
        return await self._schedule(task.title, task.description, task.reminder_time)

    async def plan_for_update(self, existing: Task, updates: Mapping[str, Any]) -> ReminderPlan:
        """
        Returns the notification_id to store, or UNCHANGED when the update does not
        mention reminder_time.

        Only schedules. The notification being replaced stays live until the caller has
        committed the new id and hands the old one to retire(), so neither a
        SchedulerError nor a failed store write leaves the stored reminder without
        its notification.
        """
        if "reminder_time" not in updates:
            return UNCHANGED

        new_time: datetime | None = updates["reminder_time"]
        self.validate_reminder(new_time)

        if new_time is None:
            return None
        title = updates.get("title") or existing.title
        body = updates["description"] if "description" in updates else existing.description
        return await self._schedule(title, body, new_time)

    async def plan_for_delete(self, existing: Task) -> None:
        await self.retire(self.current_notification_id(existing))

    def current_notification_id(self, existing: Task) -> str | None:
        """The id the store holds right now; the caller's copy may be stale."""
        try:
            return self._store.get_task(existing.id).notification_id
        except NotFoundError:
            return existing.notification_id

    async def retire(self, notification_id: str | None) -> None:
        """Cancel a notification that the stored task no longer refers to."""
        await self.discard(notification_id)

    async def discard(self, notification_id: str | None) -> None:
        """Best-effort cancel of a notification that will not be stored after all."""
        if notification_id:
            await self._cancel_quietly(notification_id)

    # ---- helpers ----

    async def _schedule(self, title: str, body: str | None, at: datetime) -> str:
        try:
            return await self._scheduler.schedule(title=title, body=body, at=at)
        except SchedulerError:
            logger.exception("Scheduling notification failed title=%s at=%s", title, at)
            raise
        except Exception as exc:
            logger.exception("Scheduling notification failed title=%s at=%s", title, at)
            raise SchedulerError(f"could not schedule notification: {exc}") from exc

    async def _cancel_quietly(self, notification_id: str) -> None:
        try:
            await self._scheduler.cancel(notification_id)
        except Exception:
            logger.exception("Cancelling notification %s failed; continuing", notification_id)

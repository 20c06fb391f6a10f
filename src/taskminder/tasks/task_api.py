# src/taskminder/tasks/task_api.py

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from ..core.ports import TaskRepo
from ..errors import ValidationError
from .reminders import UNCHANGED, ReminderCoordinator
from .task_models import NewTask, Task, TaskPriority, TaskStatus, parse_timestamp

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset(
    {"title", "description", "category", "status", "due_date", "priority", "reminder_time"}
)
_READ_ONLY_FIELDS = frozenset({"id", "created_at", "notification_id"})


def _check_keys(fields: Mapping[str, Any]) -> None:
    read_only = _READ_ONLY_FIELDS.intersection(fields)
    if read_only:
        raise ValidationError(f"read-only field(s): {', '.join(sorted(read_only))}")
    unknown = set(fields) - EDITABLE_FIELDS
    if unknown:
        raise ValidationError(f"unknown field(s): {', '.join(sorted(unknown))}")


def _clean_field(name: str, value: Any, *, default_category: str) -> Any:
    """Convert one boundary value (strings, ISO timestamps) into its model type."""
    if name == "title":
        title = str(value or "").strip()
        if not title:
            raise ValidationError("title is required")
        return title

    if name == "description":
        if value is None:
            return None
        return str(value).strip() or None

    if name == "category":
        return str(value or "").strip() or default_category

    if name == "status":
        try:
            return TaskStatus(str(value))
        except ValueError:
            raise ValidationError(f"invalid status: {value!r}") from None

    if name == "priority":
        try:
            return TaskPriority(str(value).lower())
        except ValueError:
            raise ValidationError(f"invalid priority: {value!r}") from None

    if name == "due_date":
        if value is None:
            raise ValidationError("due_date is required")
        return parse_timestamp(value, field="due_date")

    if name == "reminder_time":
        if value is None or value == "":
            return None
        return parse_timestamp(value, field="reminder_time")

    raise ValidationError(f"unknown field: {name}")


class TaskService:
    """
    Operation surface used by the presentation layer.

    Every call reads current state from the store, lets the ReminderCoordinator
    reconcile notifications, then persists. Errors are raised from errors.py:
    ValidationError / NotFoundError / SchedulerError.
    """

    def __init__(
        self,
        task_store: TaskRepo,
        reminders: ReminderCoordinator,
        *,
        default_category: str = "Personal",
    ) -> None:
        self._store = task_store
        self._reminders = reminders
        self._default_category = default_category

    async def list_tasks(self) -> list[Task]:
        return self._store.list_tasks()

    async def get_task(self, task_id: int) -> Task:
        return self._store.get_task(task_id)

    async def add_task(self, fields: Mapping[str, Any]) -> Task:
        new = self._build_new_task(fields)

        notification_id = await self._reminders.plan_for_create(new)
        try:
            task = self._store.add_task(new, notification_id=notification_id)
        except Exception:
            await self._reminders.discard(notification_id)
            raise

        logger.info("Task %s created notification=%s", task.id, notification_id)
        return task

    async def update_task(self, task_id: int, fields: Mapping[str, Any]) -> Task:
        _check_keys(fields)
        updates = {
            name: _clean_field(name, value, default_category=self._default_category)
            for name, value in fields.items()
        }

        existing = self._store.get_task(task_id)
        plan = await self._reminders.plan_for_update(existing, updates)

        to_store: dict[str, Any] = dict(updates)
        replaced: str | None = None
        if plan is not UNCHANGED:
            to_store["notification_id"] = plan
            replaced = self._reminders.current_notification_id(existing)

        try:
            self._store.update_task(task_id, to_store)
        except Exception:
            if plan is not UNCHANGED:
                await self._reminders.discard(plan)
            raise

        if plan is not UNCHANGED:
            # The old notification only goes once the row no longer points at it.
            await self._reminders.retire(replaced)
            logger.info("Task %s updated notification=%s", task_id, plan)
        else:
            logger.info("Task %s updated fields=%s", task_id, sorted(updates))
        return self._store.get_task(task_id)

    async def delete_task(self, task_id: int) -> None:
        existing = self._store.get_task(task_id)
        await self._reminders.plan_for_delete(existing)
        self._store.delete_task(task_id)
        logger.info("Task %s deleted", task_id)

    def _build_new_task(self, fields: Mapping[str, Any]) -> NewTask:
        _check_keys(fields)
        if "due_date" not in fields:
            raise ValidationError("due_date is required")

        clean = {
            name: _clean_field(name, value, default_category=self._default_category)
            for name, value in fields.items()
        }
        if "title" not in clean:
            raise ValidationError("title is required")

        return NewTask(
            title=clean["title"],
            description=clean.get("description"),
            category=clean.get("category") or self._default_category,
            status=clean.get("status") or TaskStatus.TODO,
            priority=clean.get("priority") or TaskPriority.MEDIUM,
            due_date=clean["due_date"],
            reminder_time=clean.get("reminder_time"),
        )

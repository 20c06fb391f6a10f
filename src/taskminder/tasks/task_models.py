# src/taskminder/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any

from ..errors import ValidationError


class TaskStatus(StrEnum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"

    @classmethod
    def from_db(cls, raw: str | None) -> TaskStatus:
        if not raw:
            return cls.TODO
        try:
            return cls(raw)
        except ValueError:
            return cls.TODO


class TaskPriority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def from_db(cls, raw: str | None) -> TaskPriority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(raw.lower())
        except ValueError:
            return cls.MEDIUM


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: Any, *, field: str) -> datetime:
    """
    Parse an ISO-8601 string (or datetime) into an aware UTC datetime.

    Naive values are read as local time.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str) and value.strip():
        try:
            dt = datetime.fromisoformat(value.strip())
        except ValueError:
            raise ValidationError(f"{field} is not an ISO-8601 timestamp: {value!r}") from None
    else:
        raise ValidationError(f"{field} must be an ISO-8601 timestamp")

    if dt.tzinfo is None:
        dt = dt.astimezone()
    return dt.astimezone(timezone.utc)


def to_epoch(dt: datetime | None) -> float | None:
    return dt.timestamp() if dt is not None else None


def from_epoch(ts: float | None) -> datetime | None:
    return datetime.fromtimestamp(float(ts), tz=timezone.utc) if ts is not None else None


@dataclass(slots=True)
class Task:
    id: int
    title: str
    description: str | None
    category: str
    status: TaskStatus
    priority: TaskPriority
    due_date: datetime
    created_at: datetime

    reminder_time: datetime | None = None
    notification_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Boundary form: enums as strings, timestamps as ISO-8601."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "status": self.status.value,
            "priority": self.priority.value,
            "due_date": self.due_date.isoformat(),
            "created_at": self.created_at.isoformat(),
            "reminder_time": self.reminder_time.isoformat() if self.reminder_time else None,
            "notification_id": self.notification_id,
        }


@dataclass(slots=True, frozen=True)
class NewTask:
    """A validated task that has not been stored yet (no id, no created_at)."""

    title: str
    description: str | None
    category: str
    status: TaskStatus
    priority: TaskPriority
    due_date: datetime
    reminder_time: datetime | None = None

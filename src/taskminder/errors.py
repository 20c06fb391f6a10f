# src/taskminder/errors.py

from __future__ import annotations


class TaskError(Exception):
    """Base class for every error raised by the task core."""


class ValidationError(TaskError, ValueError):
    """Input rejected before any mutation (bad field, reminder not in the future, ...)."""


class NotFoundError(TaskError, LookupError):
    """Unknown task id."""

    def __init__(self, task_id: int) -> None:
        super().__init__(f"task {task_id} not found")
        self.task_id = task_id


class SchedulerError(TaskError):
    """Scheduling a notification failed; the task mutation is not committed."""


class CancelError(TaskError):
    """Cancelling a notification failed. Callers log it and carry on."""

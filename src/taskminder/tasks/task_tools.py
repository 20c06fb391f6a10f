# src/taskminder/tasks/task_tools.py

from __future__ import annotations

"""
Function-calling surface over TaskService.

TOOLS_SCHEMA describes the operations as JSON-schema functions (for an assistant or any
JSON client); call_tool() runs one and always answers with a plain dict:
  {"success": True, ...}  or  {"success": False, "error": "..."}
"""

import logging
from typing import Any

from ..errors import NotFoundError, SchedulerError, TaskError, ValidationError
from .task_api import TaskService

logger = logging.getLogger(__name__)

_STATUS_ENUM = ["todo", "in_progress", "done"]
_PRIORITY_ENUM = ["low", "medium", "high"]


def _task_properties() -> dict[str, Any]:
    return {
        "title": {"type": "string", "description": "Title of the task"},
        "description": {"type": "string", "description": "Optional description of the task"},
        "category": {"type": "string", "description": "Category of the task"},
        "status": {"type": "string", "enum": _STATUS_ENUM, "description": "Status of the task"},
        "due_date": {"type": "string", "description": "Due date in ISO format"},
        "priority": {
            "type": "string",
            "enum": _PRIORITY_ENUM,
            "description": "Priority of the task",
        },
        "reminder_time": {
            "type": ["string", "null"],
            "description": "Optional reminder time in ISO format (null clears it)",
        },
    }


TOOLS_SCHEMA: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "getAllTasks",
        "description": "Gets all tasks from the local database.",
    },
    {
        "type": "function",
        "name": "addTask",
        "description": "Adds a task to the local database.",
        "parameters": {
            "type": "object",
            "properties": _task_properties(),
            "required": ["title", "due_date"],
        },
    },
    {
        "type": "function",
        "name": "deleteTask",
        "description": "Deletes a task from the local database.",
        "parameters": {
            "type": "object",
            "properties": {"id": {"type": "number", "description": "ID of the task to delete"}},
            "required": ["id"],
        },
    },
    {
        "type": "function",
        "name": "updateTask",
        "description": "Updates a task in the local database.",
        "parameters": {
            "type": "object",
            "properties": {
                "id": {"type": "number", "description": "ID of the task to update"},
                **_task_properties(),
            },
            "required": ["id"],
        },
    },
]


def _task_id(args: dict[str, Any]) -> int:
    try:
        return int(args["id"])
    except (KeyError, TypeError, ValueError):
        raise ValidationError("id is required") from None


def _error_kind(exc: TaskError) -> str:
    if isinstance(exc, ValidationError):
        return "validation"
    if isinstance(exc, NotFoundError):
        return "not_found"
    if isinstance(exc, SchedulerError):
        return "scheduler"
    return "task"


async def call_tool(service: TaskService, name: str, args: dict[str, Any] | None = None) -> dict[str, Any]:
    args = dict(args or {})
    try:
        if name == "getAllTasks":
            tasks = await service.list_tasks()
            return {"success": True, "tasks": [t.to_dict() for t in tasks]}

        if name == "addTask":
            task = await service.add_task(args)
            return {"success": True, "task": task.to_dict()}

        if name == "updateTask":
            task_id = _task_id(args)
            args.pop("id")
            task = await service.update_task(task_id, args)
            return {"success": True, "task": task.to_dict()}

        if name == "deleteTask":
            await service.delete_task(_task_id(args))
            return {"success": True}

    except TaskError as exc:
        logger.info("Tool %s failed: %s", name, exc)
        return {"success": False, "error": str(exc), "kind": _error_kind(exc)}
    except Exception as exc:
        logger.exception("Tool %s crashed", name)
        return {"success": False, "error": f"internal error: {exc}", "kind": "internal"}

    return {"success": False, "error": f"unknown tool: {name}", "kind": "unknown_tool"}

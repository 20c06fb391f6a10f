# src/taskminder/cli/commands.py

from __future__ import annotations

import re
import shlex
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta

from ..core.state import AppState
from ..errors import TaskError
from ..notifications.scheduler import send_test_notification
from ..tasks.task_models import Task, TaskStatus, utcnow

CommandHandler = Callable[[AppState, list[str]], Awaitable[str]]

# Short console names for task fields.
FIELD_ALIASES = {
    "desc": "description",
    "due": "due_date",
    "remind": "reminder_time",
    "reminder": "reminder_time",
    "cat": "category",
}

_RELATIVE_RE = re.compile(r"^\+(\d+)([mhd])$")
_UNITS = {"m": "minutes", "h": "hours", "d": "days"}


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as exc:
            return f"Could not parse command: {exc}"
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return await handler(state, args)
        except TaskError as exc:
            return f"Error: {exc}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def parse_time_arg(raw: str, *, now: datetime | None = None) -> str | None:
    """
    Console time values: ISO-8601, "now", "+30m" / "+2h" / "+1d", or "none" to clear.
    Returns an ISO string (or None) for TaskService.
    """
    value = raw.strip()
    if value.lower() in ("none", "null", ""):
        return None
    now = now or utcnow()
    if value.lower() == "now":
        return now.isoformat()
    m = _RELATIVE_RE.match(value)
    if m:
        delta = timedelta(**{_UNITS[m.group(2)]: int(m.group(1))})
        return (now + delta).isoformat()
    return value


def parse_field_args(args: list[str]) -> dict[str, object]:
    """key=value pairs -> update mapping (aliases resolved, time values normalized)."""
    fields: dict[str, object] = {}
    for arg in args:
        key, sep, value = arg.partition("=")
        if not sep:
            raise ValueError(f"expected key=value, got {arg!r}")
        name = FIELD_ALIASES.get(key.strip().lower(), key.strip().lower())
        if name in ("due_date", "reminder_time"):
            fields[name] = parse_time_arg(value)
        elif name == "description" and value.strip().lower() in ("none", "null"):
            fields[name] = None
        else:
            fields[name] = value
    return fields


def relative_time(when: datetime, *, now: datetime | None = None) -> str:
    now = now or utcnow()
    diff_hours = round((when - now).total_seconds() / 3600)
    if diff_hours < 0:
        return "overdue"
    if diff_hours < 24:
        return f"in {diff_hours} hours"
    return f"in {round(diff_hours / 24)} days"


def format_task(task: Task) -> str:
    check = "x" if task.status == TaskStatus.DONE else " "
    line = (
        f"[{check}] #{task.id} {task.title} ({task.category}, {task.priority.value}) "
        f"due {relative_time(task.due_date)}"
    )
    if task.reminder_time is not None:
        local = task.reminder_time.astimezone().strftime("%Y-%m-%d %H:%M")
        line += f", reminder {local}"
    return line


def _parse_id(args: list[str], usage: str) -> int:
    if not args:
        raise ValueError(usage)
    try:
        return int(args[0])
    except ValueError:
        raise ValueError(usage) from None


async def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


async def cmd_list(state: AppState, args: list[str]) -> str:
    tasks = await state.service.list_tasks()
    if not tasks:
        return "No tasks yet"
    return "\n".join(format_task(t) for t in tasks)


async def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add title="Buy milk" due=+1d [remind=+1h] [desc=...] [cat=...] [priority=high]
    """
    try:
        fields = parse_field_args(args)
    except ValueError as exc:
        return str(exc)
    fields.setdefault("due_date", utcnow().isoformat())
    task = await state.service.add_task(fields)
    return f"Added {format_task(task)}"


async def cmd_update(state: AppState, args: list[str]) -> str:
    """/update <id> key=value ...   (remind=none clears the reminder)"""
    try:
        task_id = _parse_id(args, "Usage: /update <id> key=value ...")
        fields = parse_field_args(args[1:])
    except ValueError as exc:
        return str(exc)
    task = await state.service.update_task(task_id, fields)
    return f"Updated {format_task(task)}"


async def cmd_done(state: AppState, args: list[str]) -> str:
    """/done <id> toggles between done and todo."""
    try:
        task_id = _parse_id(args, "Usage: /done <id>")
    except ValueError as exc:
        return str(exc)
    task = await state.service.get_task(task_id)
    new_status = TaskStatus.TODO if task.status == TaskStatus.DONE else TaskStatus.DONE
    task = await state.service.update_task(task_id, {"status": new_status.value})
    return format_task(task)


async def cmd_delete(state: AppState, args: list[str]) -> str:
    try:
        task_id = _parse_id(args, "Usage: /delete <id>")
    except ValueError as exc:
        return str(exc)
    await state.service.delete_task(task_id)
    return f"Deleted task #{task_id}"


async def cmd_status(state: AppState, args: list[str]) -> str:
    tasks = await state.service.list_tasks()
    done = sum(1 for t in tasks if t.status == TaskStatus.DONE)
    config = state.scheduler.config
    return (
        "Status:\n"
        f"  Tasks: {len(tasks)} ({done} done)\n"
        f"  Pending notifications: {len(state.scheduler.pending())}\n"
        f"  Notifications: {'ON' if config.permission_granted else 'OFF'}"
        f" (channel {config.channel_id} \"{config.channel_name}\", importance {config.importance},"
        f" sound {config.sound})"
    )


async def cmd_testnotify(state: AppState, args: list[str]) -> str:
    """/testnotify [seconds]"""
    try:
        delay = float(args[0]) if args else 5.0
    except ValueError:
        return "Usage: /testnotify [seconds]"
    notification_id = await send_test_notification(state.scheduler, delay_seconds=delay)
    return f"Test notification {notification_id} scheduled in {delay:g}s."


registry.register("help", cmd_help, "Show this help", aliases=["h", "?"])
registry.register("list", cmd_list, "List tasks", aliases=["ls"])
registry.register(
    "add",
    cmd_add,
    'Add a task: /add title="..." due=+1d remind=+1h desc=... cat=... priority=low|medium|high',
)
registry.register("update", cmd_update, "Update a task: /update <id> key=value ... (remind=none clears)")
registry.register("done", cmd_done, "Toggle a task between done and todo: /done <id>")
registry.register("delete", cmd_delete, "Delete a task: /delete <id>", aliases=["rm"])
registry.register("status", cmd_status, "Show task and notification status")
registry.register("testnotify", cmd_testnotify, "Schedule a test notification: /testnotify [seconds]")

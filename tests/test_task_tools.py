# tests/test_task_tools.py

from __future__ import annotations

from datetime import timedelta

import pytest

from taskminder.tasks.task_models import utcnow
from taskminder.tasks.task_tools import TOOLS_SCHEMA, call_tool


def test_tools_schema_names() -> None:
    assert [t["name"] for t in TOOLS_SCHEMA] == ["getAllTasks", "addTask", "deleteTask", "updateTask"]
    update = next(t for t in TOOLS_SCHEMA if t["name"] == "updateTask")
    assert update["parameters"]["required"] == ["id"]


@pytest.mark.asyncio
async def test_call_tool_add_update_list_delete(fake_service, notifier) -> None:
    due = (utcnow() + timedelta(days=1)).isoformat()
    remind = (utcnow() + timedelta(hours=1)).isoformat()

    added = await call_tool(fake_service, "addTask", {"title": "Call mom", "due_date": due, "reminder_time": remind})
    assert added["success"] is True
    task = added["task"]
    assert task["notification_id"] == "n1"
    assert task["status"] == "todo"

    updated = await call_tool(fake_service, "updateTask", {"id": task["id"], "reminder_time": None})
    assert updated["success"] is True
    assert updated["task"]["notification_id"] is None
    assert notifier.cancel_calls == ["n1"]

    listed = await call_tool(fake_service, "getAllTasks")
    assert [t["title"] for t in listed["tasks"]] == ["Call mom"]

    assert await call_tool(fake_service, "deleteTask", {"id": task["id"]}) == {"success": True}


@pytest.mark.asyncio
async def test_call_tool_reports_errors(fake_service) -> None:
    past = (utcnow() - timedelta(hours=1)).isoformat()
    due = (utcnow() + timedelta(days=1)).isoformat()

    res = await call_tool(fake_service, "addTask", {"title": "x", "due_date": due, "reminder_time": past})
    assert res == {"success": False, "error": "reminder in past", "kind": "validation"}

    res = await call_tool(fake_service, "deleteTask", {"id": 77})
    assert res["success"] is False and res["kind"] == "not_found"

    res = await call_tool(fake_service, "updateTask", {"title": "no id"})
    assert res["kind"] == "validation"

    res = await call_tool(fake_service, "archiveTask", {})
    assert res["kind"] == "unknown_tool"


@pytest.mark.asyncio
async def test_call_tool_turns_storage_failure_into_error_dict(fake_service, fake_repo, notifier) -> None:
    fake_repo.fail_writes = True
    due = (utcnow() + timedelta(days=1)).isoformat()
    remind = (utcnow() + timedelta(hours=1)).isoformat()

    res = await call_tool(fake_service, "addTask", {"title": "Pay rent", "due_date": due, "reminder_time": remind})

    assert res == {"success": False, "error": "internal error: disk full", "kind": "internal"}
    assert notifier.live == {}

# tests/test_reminders.py

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from taskminder.errors import ValidationError
from taskminder.tasks.reminders import UNCHANGED, ReminderCoordinator
from taskminder.tasks.task_models import NewTask, Task, TaskPriority, TaskStatus

from .fakes import FakeNotificationScheduler, FakeTaskRepo

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _task(**overrides) -> Task:
    task = Task(
        id=1,
        title="Water plants",
        description="balcony",
        category="Home",
        status=TaskStatus.TODO,
        priority=TaskPriority.LOW,
        due_date=NOW + timedelta(days=1),
        created_at=NOW - timedelta(days=1),
        reminder_time=NOW + timedelta(hours=1),
        notification_id="old",
    )
    return replace(task, **overrides)


def _coordinator(repo: FakeTaskRepo, notifier: FakeNotificationScheduler) -> ReminderCoordinator:
    return ReminderCoordinator(notifier, repo, clock=lambda: NOW)


def test_reminder_equal_to_now_is_invalid() -> None:
    coord = _coordinator(FakeTaskRepo(), FakeNotificationScheduler())

    with pytest.raises(ValidationError):
        coord.validate_reminder(NOW)
    coord.validate_reminder(NOW + timedelta(microseconds=1))
    coord.validate_reminder(None)


@pytest.mark.asyncio
async def test_plan_for_create_without_reminder_returns_none() -> None:
    notifier = FakeNotificationScheduler()
    coord = _coordinator(FakeTaskRepo(), notifier)
    new = NewTask(
        title="t",
        description=None,
        category="c",
        status=TaskStatus.TODO,
        priority=TaskPriority.MEDIUM,
        due_date=NOW,
    )

    assert await coord.plan_for_create(new) is None
    assert notifier.schedule_calls == []


@pytest.mark.asyncio
async def test_plan_for_update_without_reminder_key_is_unchanged() -> None:
    notifier = FakeNotificationScheduler()
    coord = _coordinator(FakeTaskRepo([_task()]), notifier)

    assert await coord.plan_for_update(_task(), {"title": "x"}) is UNCHANGED
    assert notifier.schedule_calls == []
    assert notifier.cancel_calls == []


@pytest.mark.asyncio
async def test_plan_for_update_schedules_without_cancelling() -> None:
    repo = FakeTaskRepo([_task()])
    notifier = FakeNotificationScheduler()
    coord = _coordinator(repo, notifier)

    assert await coord.plan_for_update(_task(), {"reminder_time": None}) is None
    plan = await coord.plan_for_update(_task(), {"reminder_time": NOW + timedelta(hours=2)})

    assert plan == "n1"
    assert notifier.cancel_calls == []


@pytest.mark.asyncio
async def test_current_id_comes_from_store_not_caller_copy() -> None:
    # The caller's copy is stale: a concurrent update already replaced "old" with "newer".
    repo = FakeTaskRepo([_task(notification_id="newer")])
    notifier = FakeNotificationScheduler()
    coord = _coordinator(repo, notifier)

    current = coord.current_notification_id(_task(notification_id="old"))
    await coord.retire(current)

    assert current == "newer"
    assert notifier.cancel_calls == ["newer"]


@pytest.mark.asyncio
async def test_plan_for_update_explicit_description_none_is_used() -> None:
    repo = FakeTaskRepo([_task()])
    notifier = FakeNotificationScheduler()
    coord = _coordinator(repo, notifier)

    plan = await coord.plan_for_update(
        _task(), {"description": None, "reminder_time": NOW + timedelta(hours=4)}
    )

    assert plan == "n1"
    assert notifier.schedule_calls[0].title == "Water plants"
    assert notifier.schedule_calls[0].body is None
    assert notifier.cancel_calls == []


@pytest.mark.asyncio
async def test_plan_for_delete_without_notification_does_nothing() -> None:
    repo = FakeTaskRepo([_task(reminder_time=None, notification_id=None)])
    notifier = FakeNotificationScheduler()

    await _coordinator(repo, notifier).plan_for_delete(repo.get_task(1))

    assert notifier.cancel_calls == []


@pytest.mark.asyncio
async def test_plan_for_delete_falls_back_to_caller_copy_when_row_is_gone() -> None:
    notifier = FakeNotificationScheduler()

    await _coordinator(FakeTaskRepo(), notifier).plan_for_delete(_task())

    assert notifier.cancel_calls == ["old"]

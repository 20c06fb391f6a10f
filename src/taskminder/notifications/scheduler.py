# src/taskminder/notifications/scheduler.py

from __future__ import annotations

"""
Local notification scheduler.

One APScheduler DateTrigger job per notification; the job id is the notification id,
so cancelling is just removing the job. When a job fires, the notification is
published to NotificationEvents and the presentation layer displays it.
"""

import logging
import uuid
from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime, timedelta

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger

from ..errors import CancelError, SchedulerError
from ..tasks.task_models import utcnow
from .events import EventType, Notification, NotificationEvents

logger = logging.getLogger(__name__)

# Delivered notifications kept around so a later press can be reported.
MAX_DELIVERED = 256


@dataclass(frozen=True, slots=True)
class NotificationConfig:
    """
    Process-wide notification setup (permission + channel), created once at startup
    and injected into the scheduler.
    """

    channel_id: str = "default"
    channel_name: str = "Default Channel"
    importance: str = "high"
    sound: str = "default"
    permission_granted: bool = True
    misfire_grace_seconds: int = 60

    @classmethod
    def from_settings(cls, settings) -> NotificationConfig:
        return cls(
            channel_id=str(getattr(settings, "notification_channel_id", "default")),
            channel_name=str(getattr(settings, "notification_channel_name", "Default Channel")),
            sound=str(getattr(settings, "notification_sound", "default")),
            permission_granted=bool(getattr(settings, "notifications_enabled", True)),
            misfire_grace_seconds=int(getattr(settings, "misfire_grace_seconds", 60)),
        )


class LocalNotificationScheduler:
    def __init__(
        self,
        config: NotificationConfig,
        events: NotificationEvents,
        *,
        scheduler: AsyncIOScheduler | None = None,
    ) -> None:
        self._config = config
        self._events = events
        self._scheduler = scheduler or AsyncIOScheduler()
        self._delivered: OrderedDict[str, Notification] = OrderedDict()

    @property
    def config(self) -> NotificationConfig:
        return self._config

    @property
    def running(self) -> bool:
        return bool(self._scheduler.running)

    def start(self) -> None:
        """Start the job loop. Must be called from inside the running event loop."""
        if self._scheduler.running:
            return
        self._scheduler.start()
        logger.info(
            "Notification scheduler started channel=%s permission=%s",
            self._config.channel_id,
            self._config.permission_granted,
        )

    def shutdown(self) -> None:
        if not self._scheduler.running:
            return
        self._scheduler.shutdown(wait=False)
        logger.info("Notification scheduler stopped")

    def pending(self) -> list[str]:
        """Ids of notifications that have not fired yet."""
        return [job.id for job in self._scheduler.get_jobs()]

    async def schedule(self, *, title: str, body: str | None, at: datetime) -> str:
        if not self._config.permission_granted:
            raise SchedulerError("notification permission not granted")

        notification = Notification(
            id=uuid.uuid4().hex,
            title=title,
            body=body or None,
            scheduled_for=at,
            channel_id=self._config.channel_id,
        )

        try:
            self._scheduler.add_job(
                self._fire,
                trigger=DateTrigger(run_date=at),
                args=[notification],
                id=notification.id,
                name=f"notification:{title}",
                misfire_grace_time=self._config.misfire_grace_seconds,
            )
        except Exception as exc:
            raise SchedulerError(f"could not schedule notification: {exc}") from exc

        logger.info("Notification scheduled id=%s at=%s", notification.id, at.isoformat())
        return notification.id

    async def cancel(self, notification_id: str) -> None:
        try:
            self._scheduler.remove_job(notification_id)
        except JobLookupError:
            # Already fired, already cancelled, or never existed.
            logger.debug("Notification %s not pending; nothing to cancel", notification_id)
            return
        except Exception as exc:
            raise CancelError(f"could not cancel notification {notification_id}: {exc}") from exc

        logger.info("Notification cancelled id=%s", notification_id)

    async def press(self, notification_id: str) -> bool:
        """Report a user press on a delivered notification. False if it was never delivered."""
        notification = self._delivered.get(notification_id)
        if notification is None:
            return False
        await self._events.publish(EventType.PRESSED, notification)
        return True

    async def _fire(self, notification: Notification) -> None:
        # The task row keeps this id after delivery; cancel() treats it as a no-op.
        self._delivered[notification.id] = notification
        while len(self._delivered) > MAX_DELIVERED:
            self._delivered.popitem(last=False)
        logger.info("Notification delivered id=%s title=%s", notification.id, notification.title)
        await self._events.publish(EventType.DELIVERED, notification)


async def send_test_notification(
    scheduler: LocalNotificationScheduler, *, delay_seconds: float = 5.0
) -> str:
    """Schedule a throwaway notification a few seconds ahead to check delivery works."""
    at = utcnow() + timedelta(seconds=max(0.0, float(delay_seconds)))
    notification_id = await scheduler.schedule(
        title="Test Notification",
        body="If you see this, notifications are working.",
        at=at,
    )
    logger.info("Test notification %s scheduled for %s", notification_id, at.isoformat())
    return notification_id

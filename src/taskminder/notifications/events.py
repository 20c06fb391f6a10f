# src/taskminder/notifications/events.py

from __future__ import annotations

"""
Notification event observers.

The scheduler publishes an event when a reminder fires; the presentation layer
registers callbacks here and decides how to display it or react to a press.
"""

import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    DELIVERED = "delivered"
    PRESSED = "pressed"


@dataclass(slots=True, frozen=True)
class Notification:
    id: str
    title: str
    body: str | None
    scheduled_for: datetime
    channel_id: str


NotificationHandler = Callable[[EventType, Notification], Awaitable[None] | None]


class NotificationEvents:
    """Observer registry. A failing handler is logged and does not stop the others."""

    def __init__(self) -> None:
        self._handlers: dict[EventType, list[NotificationHandler]] = {t: [] for t in EventType}

    def subscribe(self, event: EventType, handler: NotificationHandler) -> Callable[[], None]:
        """Register a handler; returns a callable that unregisters it."""
        self._handlers[event].append(handler)

        def _unsubscribe() -> None:
            if handler in self._handlers[event]:
                self._handlers[event].remove(handler)

        return _unsubscribe

    def on_delivered(self, handler: NotificationHandler) -> Callable[[], None]:
        return self.subscribe(EventType.DELIVERED, handler)

    def on_pressed(self, handler: NotificationHandler) -> Callable[[], None]:
        return self.subscribe(EventType.PRESSED, handler)

    async def publish(self, event: EventType, notification: Notification) -> None:
        for handler in list(self._handlers[event]):
            try:
                result = handler(event, notification)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception(
                    "Notification handler failed event=%s notification=%s",
                    event.value,
                    notification.id,
                )

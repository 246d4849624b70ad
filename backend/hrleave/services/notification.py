from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class Notification(BaseModel):
    """An administrative alert emitted by the leave core."""

    tenant_id: str
    event: str  # e.g. "leave_request.pending", "accrual.completed"
    message: str
    data: dict[str, Any] = Field(default_factory=dict)


@runtime_checkable
class Notifier(Protocol):
    """Interface for the notification channel."""

    async def notify(self, notification: Notification) -> None:
        """Deliver a notification. Must not raise for delivery problems."""
        ...


class LoggingNotifier:
    """Writes notifications to the application log."""

    async def notify(self, notification: Notification) -> None:
        logger.info(
            "Notification tenant=%s event=%s: %s",
            notification.tenant_id,
            notification.event,
            notification.message,
        )


class InMemoryNotifier:
    """Collects notifications in memory (for development and tests)."""

    def __init__(self) -> None:
        self.sent: list[Notification] = []

    async def notify(self, notification: Notification) -> None:
        self.sent.append(notification)

    def events(self) -> list[str]:
        return [n.event for n in self.sent]


_notifier: Notifier = LoggingNotifier()


def get_notifier() -> Notifier:
    """Return the configured notification channel."""
    return _notifier


def set_notifier(notifier: Notifier) -> None:
    """Override the notifier (for testing or production wiring)."""
    global _notifier
    _notifier = notifier


async def send_notification(tenant_id: str, event: str, message: str, **data: Any) -> None:
    """Send through the configured notifier after the triggering transaction committed."""
    try:
        await get_notifier().notify(Notification(tenant_id=tenant_id, event=event, message=message, data=data))
    except Exception:
        logger.exception("Failed to deliver notification tenant=%s event=%s", tenant_id, event)

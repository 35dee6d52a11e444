"""
Notification module.

Notifications are the only thing a transition emits besides the new state:
short human-readable events handed to an external sink for display.
"""

from typing import Protocol

from pydantic import BaseModel, Field

from essence_combat.core.constants import DEFAULT_NOTIFICATION_DURATION, Severity
from essence_combat.core.utils import cprint


class Notification(BaseModel):
    """A human-readable event for the player."""

    message: str = Field(description="Text shown to the player.")
    severity: Severity = Field(
        Severity.INFO,
        description="Affects how the event is styled.",
    )
    duration: int = Field(
        DEFAULT_NOTIFICATION_DURATION,
        ge=0,
        description="How long the event should be displayed, in milliseconds.",
    )

    def __str__(self) -> str:
        return f"{self.severity.emoji} {self.severity.colorize(self.message)}"


class NotificationSink(Protocol):
    """Receives the notifications emitted by a combat session."""

    def notify(self, notification: Notification) -> None: ...


class NotificationLog:
    """Keeps every notification in memory, in delivery order."""

    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    @property
    def messages(self) -> list[str]:
        return [n.message for n in self.notifications]

    def last(self) -> Notification | None:
        return self.notifications[-1] if self.notifications else None

    def clear(self) -> None:
        self.notifications.clear()


class ConsoleNotificationSink:
    """Prints notifications on the rich console."""

    def notify(self, notification: Notification) -> None:
        cprint(f"    {notification}")

"""Notification emitter and read-state management."""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from pantry_tracker.domain.notifications import Notification, NotificationType
from pantry_tracker.services.clock import Clock

_logger = logging.getLogger(__name__)


class NotificationRepository(Protocol):
    """Persistence interface for notifications."""

    def list_notifications(self) -> list[Notification]:
        """Return all notifications."""

    def create_notification(  # noqa: PLR0913
        self,
        food_item_id: int | None,
        type: NotificationType,  # noqa: A002
        message: str,
        is_read: bool,
        created_at: datetime,
    ) -> Notification:
        """Insert a notification and return it with its id."""

    def mark_read(self, notification_id: int) -> bool:
        """Set is_read on a notification; False when it does not exist."""

    def delete_notification(self, notification_id: int) -> bool:
        """Delete a notification; False when it does not exist."""


@dataclass
class NotificationService:
    """Creates and lists notifications."""

    repository: NotificationRepository
    clock: Clock
    lock: threading.RLock = field(default_factory=threading.RLock)

    def emit(
        self,
        food_item_id: int | None,
        type: NotificationType,  # noqa: A002
        message: str,
    ) -> Notification:
        """Create an unread notification stamped with the current time."""
        with self.lock:
            notification = self.repository.create_notification(
                food_item_id=food_item_id,
                type=type,
                message=message,
                is_read=False,
                created_at=self.clock.now(),
            )
        _logger.info(
            "Notification created",
            extra={"notification_id": notification.id, "type": str(type)},
        )
        return notification

    def list_notifications(self) -> list[Notification]:
        """Return notifications newest first."""
        with self.lock:
            notifications = self.repository.list_notifications()
        return sorted(
            notifications, key=lambda item: (item.created_at, item.id), reverse=True
        )

    def mark_as_read(self, notification_id: int) -> bool:
        """Mark a notification read. Marking an already read one succeeds."""
        with self.lock:
            return self.repository.mark_read(notification_id)

    def discard(self, notification_id: int) -> None:
        """Remove a notification created by a mutation that was rolled back."""
        with self.lock:
            self.repository.delete_notification(notification_id)

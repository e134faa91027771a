"""Supabase repository for notifications."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from pantry_tracker.domain.errors import InternalError
from pantry_tracker.domain.notifications import Notification, NotificationType
from pantry_tracker.services.notifications import NotificationRepository


@dataclass
class SupabaseNotificationRepository(NotificationRepository):
    """Supabase-backed notification repository."""

    client: Client

    def list_notifications(self) -> list[Notification]:
        """Return all notifications, newest first."""
        response = (
            self.client.table("notifications")
            .select("*")
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_notification(row) for row in response.data or []]

    def create_notification(  # noqa: PLR0913
        self,
        food_item_id: int | None,
        type: NotificationType,  # noqa: A002
        message: str,
        is_read: bool,
        created_at: datetime,
    ) -> Notification:
        """Insert a notification row and return it."""
        response = (
            self.client.table("notifications")
            .insert(
                {
                    "food_item_id": food_item_id,
                    "type": type.value,
                    "message": message,
                    "is_read": is_read,
                    "created_at": created_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise InternalError("Failed to create notification")
        return _parse_notification(response.data[0])

    def mark_read(self, notification_id: int) -> bool:
        """Flag a notification as read."""
        response = (
            self.client.table("notifications")
            .update({"is_read": True})
            .eq("id", notification_id)
            .execute()
        )
        return bool(response.data)

    def delete_notification(self, notification_id: int) -> bool:
        """Delete a notification row."""
        response = (
            self.client.table("notifications")
            .delete()
            .eq("id", notification_id)
            .execute()
        )
        return bool(response.data)


def _parse_notification(row: dict[str, object]) -> Notification:
    food_item_id = row.get("food_item_id")
    return Notification(
        id=int(row["id"]),
        food_item_id=int(food_item_id) if food_item_id is not None else None,
        type=NotificationType(row["type"]),
        message=str(row.get("message", "")),
        is_read=bool(row.get("is_read") or False),
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )

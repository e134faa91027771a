"""Notification endpoints."""

from typing import TYPE_CHECKING

from fastapi import APIRouter, HTTPException, Request, status

from pantry_tracker.api.schemas import MessageResponse, NotificationResponse

if TYPE_CHECKING:
    from pantry_tracker.containers import AppContainer

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("")
async def list_notifications(request: Request) -> list[NotificationResponse]:
    """Return notifications, newest first."""
    container: AppContainer = request.app.state.container
    return [
        NotificationResponse.from_domain(notification)
        for notification in container.notification_service.list_notifications()
    ]


@router.patch("/{notification_id}/read")
async def mark_notification_read(
    notification_id: int, request: Request
) -> MessageResponse:
    """Mark a notification as read."""
    container: AppContainer = request.app.state.container
    if not container.notification_service.mark_as_read(notification_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found"
        )
    return MessageResponse(message="Notification marked as read")

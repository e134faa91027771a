"""Domain models for notifications."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class NotificationType(StrEnum):
    """Kinds of notification the tracker emits."""

    EXPIRATION = "expiration"
    AUTO_CONSUMED = "auto_consumed"
    DEPLETED = "depleted"


@dataclass(frozen=True)
class Notification:
    """A notification shown to the household."""

    id: int
    food_item_id: int | None
    type: NotificationType
    message: str
    is_read: bool
    created_at: datetime

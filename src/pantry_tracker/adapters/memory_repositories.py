"""In-memory repositories, the default storage backend."""

import itertools
from dataclasses import dataclass, field, replace
from datetime import date, datetime

from pantry_tracker.domain.cart import ShoppingCartItem
from pantry_tracker.domain.inventory import FoodItem, Unit
from pantry_tracker.domain.notifications import Notification, NotificationType
from pantry_tracker.services.cart import CartRepository
from pantry_tracker.services.inventory import FoodItemRepository
from pantry_tracker.services.notifications import NotificationRepository
from pantry_tracker.services.trigger import DayMarkerRepository


def _id_sequence() -> "itertools.count[int]":
    return itertools.count(1)


@dataclass
class InMemoryFoodItemRepository(FoodItemRepository):
    """Food items held in a dict keyed by a monotonically increasing id."""

    items: dict[int, FoodItem] = field(default_factory=dict)
    _ids: "itertools.count[int]" = field(default_factory=_id_sequence, repr=False)

    def list_food_items(self) -> list[FoodItem]:
        return list(self.items.values())

    def get_food_item(self, food_item_id: int) -> FoodItem | None:
        return self.items.get(food_item_id)

    def create_food_item(
        self, fields: dict[str, object], created_at: datetime
    ) -> FoodItem:
        item = FoodItem(id=next(self._ids), created_at=created_at, **fields)
        self.items[item.id] = item
        return item

    def update_food_item(
        self, food_item_id: int, fields: dict[str, object]
    ) -> FoodItem | None:
        current = self.items.get(food_item_id)
        if current is None:
            return None
        updated = replace(current, **fields)
        self.items[food_item_id] = updated
        return updated

    def delete_food_item(self, food_item_id: int) -> bool:
        return self.items.pop(food_item_id, None) is not None


@dataclass
class InMemoryNotificationRepository(NotificationRepository):
    """Notifications held in insertion order."""

    notifications: dict[int, Notification] = field(default_factory=dict)
    _ids: "itertools.count[int]" = field(default_factory=_id_sequence, repr=False)

    def list_notifications(self) -> list[Notification]:
        return list(self.notifications.values())

    def create_notification(  # noqa: PLR0913
        self,
        food_item_id: int | None,
        type: NotificationType,  # noqa: A002
        message: str,
        is_read: bool,
        created_at: datetime,
    ) -> Notification:
        notification = Notification(
            id=next(self._ids),
            food_item_id=food_item_id,
            type=type,
            message=message,
            is_read=is_read,
            created_at=created_at,
        )
        self.notifications[notification.id] = notification
        return notification

    def mark_read(self, notification_id: int) -> bool:
        current = self.notifications.get(notification_id)
        if current is None:
            return False
        self.notifications[notification_id] = replace(current, is_read=True)
        return True

    def delete_notification(self, notification_id: int) -> bool:
        return self.notifications.pop(notification_id, None) is not None


@dataclass
class InMemoryCartRepository(CartRepository):
    """Shopping cart entries held in insertion order."""

    cart_items: dict[int, ShoppingCartItem] = field(default_factory=dict)
    _ids: "itertools.count[int]" = field(default_factory=_id_sequence, repr=False)

    def list_cart_items(self) -> list[ShoppingCartItem]:
        return list(self.cart_items.values())

    def create_cart_item(
        self, name: str, quantity: int, unit: Unit, added_at: datetime
    ) -> ShoppingCartItem:
        item = ShoppingCartItem(
            id=next(self._ids),
            name=name,
            quantity=quantity,
            unit=unit,
            added_at=added_at,
        )
        self.cart_items[item.id] = item
        return item

    def delete_cart_item(self, cart_item_id: int) -> bool:
        return self.cart_items.pop(cart_item_id, None) is not None


@dataclass
class InMemoryDayMarkerRepository(DayMarkerRepository):
    """Day marker kept for the lifetime of the process."""

    day: date | None = None

    def get_last_processed_day(self) -> date | None:
        return self.day

    def set_last_processed_day(self, day: date) -> None:
        self.day = day

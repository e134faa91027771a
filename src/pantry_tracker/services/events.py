"""Dispatch domain events to the notification emitter and the cart."""

import logging
from dataclasses import dataclass, field

from pantry_tracker.domain.cart import ShoppingCartItem
from pantry_tracker.domain.events import (
    DomainEvent,
    ExpirationApproaching,
    ItemAutoConsumed,
    ItemDepleted,
)
from pantry_tracker.domain.notifications import Notification, NotificationType
from pantry_tracker.services.cart import CartService
from pantry_tracker.services.notifications import NotificationService

_logger = logging.getLogger(__name__)


@dataclass
class DispatchResult:
    """Records created while handling a batch of events."""

    notifications: list[Notification] = field(default_factory=list)
    cart_items: list[ShoppingCartItem] = field(default_factory=list)


@dataclass
class EventDispatcher:
    """Turns domain events into notifications and cart entries."""

    notification_service: NotificationService
    cart_service: CartService

    def dispatch(self, events: list[DomainEvent]) -> DispatchResult:
        """Apply every event in order.

        If any step fails, records created by this call are removed before the
        error propagates.
        """
        result = DispatchResult()
        try:
            for event in events:
                self._apply(event, result)
        except Exception:
            _logger.exception("Event dispatch failed, rolling back cascade")
            self.rollback(result)
            raise
        return result

    def _apply(self, event: DomainEvent, result: DispatchResult) -> None:
        match event:
            case ExpirationApproaching():
                result.notifications.append(
                    self.notification_service.emit(
                        event.food_item_id,
                        NotificationType.EXPIRATION,
                        _expiration_message(event),
                    )
                )
            case ItemDepleted():
                result.notifications.append(
                    self.notification_service.emit(
                        event.food_item_id,
                        NotificationType.DEPLETED,
                        f"{event.name} ran out and was added to the shopping cart.",
                    )
                )
                result.cart_items.append(
                    self.cart_service.add_to_cart(
                        {"name": event.name, "quantity": 1, "unit": event.unit}
                    )
                )
            case ItemAutoConsumed():
                result.notifications.append(
                    self.notification_service.emit(
                        event.food_item_id,
                        NotificationType.AUTO_CONSUMED,
                        f"Automatically consumed {event.amount} {event.unit} "
                        f"of {event.name}.",
                    )
                )

    def rollback(self, result: DispatchResult) -> None:
        """Remove the records a successful dispatch created."""
        for cart_item in result.cart_items:
            self.cart_service.remove_from_cart(cart_item.id)
        for notification in result.notifications:
            self.notification_service.discard(notification.id)


def _expiration_message(event: ExpirationApproaching) -> str:
    suffix = "day" if event.days_left == 1 else "days"
    return f"{event.name} expires in {event.days_left} {suffix}."

"""Shopping cart service."""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from pantry_tracker.domain.cart import ShoppingCartItem
from pantry_tracker.domain.errors import FieldError, ValidationError
from pantry_tracker.domain.inventory import Unit
from pantry_tracker.services.clock import Clock

_logger = logging.getLogger(__name__)


class CartRepository(Protocol):
    """Persistence interface for shopping cart entries."""

    def list_cart_items(self) -> list[ShoppingCartItem]:
        """Return cart entries in insertion order."""

    def create_cart_item(
        self, name: str, quantity: int, unit: Unit, added_at: datetime
    ) -> ShoppingCartItem:
        """Insert a cart entry and return it with its id."""

    def delete_cart_item(self, cart_item_id: int) -> bool:
        """Delete a cart entry; False when it does not exist."""


@dataclass
class CartService:
    """Routes items onto the shopping list."""

    repository: CartRepository
    clock: Clock
    lock: threading.RLock = field(default_factory=threading.RLock)

    def list_cart(self) -> list[ShoppingCartItem]:
        """Return the shopping list."""
        with self.lock:
            return self.repository.list_cart_items()

    def add_to_cart(self, payload: dict[str, object]) -> ShoppingCartItem:
        """Append an entry. Entries with the same name are never merged."""
        name, quantity, unit = _validate_cart_payload(payload)
        with self.lock:
            item = self.repository.create_cart_item(
                name=name, quantity=quantity, unit=unit, added_at=self.clock.now()
            )
        _logger.info("Added to shopping cart", extra={"cart_item_id": item.id})
        return item

    def remove_from_cart(self, cart_item_id: int) -> bool:
        """Remove an entry; False when the id is unknown."""
        with self.lock:
            removed = self.repository.delete_cart_item(cart_item_id)
        if removed:
            _logger.info("Removed from shopping cart", extra={"cart_item_id": cart_item_id})
        return removed


def _validate_cart_payload(payload: dict[str, object]) -> tuple[str, int, Unit]:
    errors: list[FieldError] = []
    name = payload.get("name")
    if not isinstance(name, str) or not name.strip():
        errors.append(FieldError("name", "Name is required"))
    quantity = payload.get("quantity")
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        errors.append(FieldError("quantity", "Quantity must be an integer"))
    elif quantity <= 0:
        errors.append(FieldError("quantity", "Quantity must be greater than 0"))
    unit = None
    try:
        unit = Unit(payload.get("unit"))
    except ValueError:
        errors.append(FieldError("unit", "Unknown unit"))
    if errors:
        raise ValidationError(errors)
    return name, quantity, unit

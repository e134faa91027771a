"""Domain models for the shopping cart."""

from dataclasses import dataclass
from datetime import datetime

from pantry_tracker.domain.inventory import Unit


@dataclass(frozen=True)
class ShoppingCartItem:
    """An entry on the shopping list."""

    id: int
    name: str
    quantity: int
    unit: Unit
    added_at: datetime

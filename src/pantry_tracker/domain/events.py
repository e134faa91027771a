"""Domain events raised by inventory mutations."""

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pantry_tracker.domain.inventory import Unit


@dataclass(frozen=True)
class ExpirationApproaching:
    """A newly registered item expires within the warning window."""

    food_item_id: int
    name: str
    days_left: int


@dataclass(frozen=True)
class ItemDepleted:
    """An item's quantity dropped to exactly zero."""

    food_item_id: int
    name: str
    unit: "Unit"


@dataclass(frozen=True)
class ItemAutoConsumed:
    """The daily routine consumed stock from an item."""

    food_item_id: int
    name: str
    amount: int
    unit: "Unit"


DomainEvent = ExpirationApproaching | ItemDepleted | ItemAutoConsumed

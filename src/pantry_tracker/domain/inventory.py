"""Domain models and rules for the food inventory."""

import math
from dataclasses import dataclass, replace
from datetime import date, datetime, time, timedelta
from enum import StrEnum

from pantry_tracker.domain.events import DomainEvent, ExpirationApproaching, ItemDepleted

DANGER_DAYS = 1
WARNING_DAYS = 3


class Unit(StrEnum):
    """Units a quantity can be measured in."""

    PIECE = "piece"
    GRAM = "gram"
    KILOGRAM = "kilogram"
    MILLILITER = "milliliter"
    LITER = "liter"
    SERVING = "serving"


class FoodCategory(StrEnum):
    """Storage category of a food item."""

    REFRIGERATED = "refrigerated"
    FROZEN = "frozen"
    FRUITS_VEGETABLES = "fruits_vegetables"
    MEAT = "meat"
    DAIRY = "dairy"
    OTHER = "other"


class ExpirationStatus(StrEnum):
    """Freshness band derived from the days left before expiration."""

    EXPIRED = "expired"
    DANGER = "danger"
    WARNING = "warning"
    FRESH = "fresh"


@dataclass(frozen=True)
class FoodItem:
    """A tracked perishable item."""

    id: int
    name: str
    quantity: int
    unit: Unit
    category: FoodCategory
    expiration_date: date
    auto_consume: bool
    daily_consumption_amount: int
    daily_consumption_unit: Unit
    created_at: datetime

    @property
    def is_depleted(self) -> bool:
        return self.quantity == 0


@dataclass(frozen=True)
class InventorySummary:
    """Dashboard counters over the whole inventory."""

    total_items: int
    expiring_items: int
    depleted_items: int


def days_until_expiration(expiration_date: date, now: datetime) -> int:
    """Return ceil((expiration - now) / 1 day), expiration taken at local midnight."""
    expires_at = datetime.combine(expiration_date, time.min, tzinfo=now.tzinfo)
    return math.ceil((expires_at - now) / timedelta(days=1))


def calendar_days_until(expiration_date: date, today: date) -> int:
    """Return the whole-day distance between today and the expiration date."""
    return (expiration_date - today).days


def expiration_status(days: int) -> ExpirationStatus:
    if days < 0:
        return ExpirationStatus.EXPIRED
    if days <= DANGER_DAYS:
        return ExpirationStatus.DANGER
    if days <= WARNING_DAYS:
        return ExpirationStatus.WARNING
    return ExpirationStatus.FRESH


def expiration_events(
    item: FoodItem, now: datetime, warning_days: int = WARNING_DAYS
) -> list[DomainEvent]:
    """Return the expiration warning raised when an item is registered."""
    days = days_until_expiration(item.expiration_date, now)
    if days > warning_days:
        return []
    return [
        ExpirationApproaching(food_item_id=item.id, name=item.name, days_left=days)
    ]


def consume_stock(item: FoodItem, amount: int) -> tuple[FoodItem, list[DomainEvent]]:
    """Reduce stock by amount, clamped at zero.

    Depletion is raised only on the transition into zero, so consuming an
    already empty item yields no events.
    """
    remaining = max(0, item.quantity - amount)
    updated = replace(item, quantity=remaining)
    events: list[DomainEvent] = []
    if item.quantity > 0 and remaining == 0:
        events.append(ItemDepleted(food_item_id=item.id, name=item.name, unit=item.unit))
    return updated, events


def summarize(
    items: list[FoodItem], today: date, warning_days: int = WARNING_DAYS
) -> InventorySummary:
    """Count all, soon-expiring and depleted items."""
    expiring = 0
    for item in items:
        days = calendar_days_until(item.expiration_date, today)
        if 0 <= days <= warning_days:
            expiring += 1
    return InventorySummary(
        total_items=len(items),
        expiring_items=expiring,
        depleted_items=sum(1 for item in items if item.is_depleted),
    )

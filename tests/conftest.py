"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta

import pytest

from pantry_tracker.adapters.memory_repositories import (
    InMemoryCartRepository,
    InMemoryDayMarkerRepository,
    InMemoryFoodItemRepository,
    InMemoryNotificationRepository,
)
from pantry_tracker.config import Settings
from pantry_tracker.containers import AppContainer, Repositories, wire_container
from pantry_tracker.domain.cart import ShoppingCartItem
from pantry_tracker.domain.errors import InternalError
from pantry_tracker.domain.inventory import FoodItem, Unit
from pantry_tracker.services.clock import Clock

FIXED_NOW = datetime(2026, 10, 19, 9, 0, tzinfo=UTC)


@dataclass
class FixedClock(Clock):
    """Clock frozen at a given instant until advanced."""

    current: datetime = FIXED_NOW

    def now(self) -> datetime:
        return self.current

    def today(self) -> date:
        return self.current.date()

    def advance(self, days: int = 0, hours: int = 0) -> None:
        self.current = self.current + timedelta(days=days, hours=hours)


@dataclass
class FailingCartRepository(InMemoryCartRepository):
    """Cart repository whose inserts fail until ``fail`` is cleared."""

    fail: bool = True

    def create_cart_item(
        self, name: str, quantity: int, unit: Unit, added_at: datetime
    ) -> ShoppingCartItem:
        if self.fail:
            raise InternalError("cart storage unavailable")
        return super().create_cart_item(name, quantity, unit, added_at)


@dataclass
class StaleListingRepository(InMemoryFoodItemRepository):
    """Lists items that were deleted after the listing was taken."""

    ghosts: list[FoodItem] = field(default_factory=list)

    def list_food_items(self) -> list[FoodItem]:
        return [*self.ghosts, *super().list_food_items()]


def food_payload(**overrides: object) -> dict[str, object]:
    """Return a valid food item payload expiring in a week."""
    payload: dict[str, object] = {
        "name": "Milk",
        "quantity": 5,
        "unit": Unit.LITER,
        "category": "dairy",
        "expiration_date": FIXED_NOW.date() + timedelta(days=7),
        "auto_consume": False,
        "daily_consumption_amount": 0,
        "daily_consumption_unit": Unit.LITER,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def settings() -> Settings:
    return Settings(storage_backend="memory", environment="test")


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def repositories() -> Repositories:
    return Repositories(
        food_items=InMemoryFoodItemRepository(),
        notifications=InMemoryNotificationRepository(),
        cart=InMemoryCartRepository(),
        day_marker=InMemoryDayMarkerRepository(),
    )


@pytest.fixture
def container(
    settings: Settings, repositories: Repositories, clock: FixedClock
) -> AppContainer:
    return wire_container(settings, repositories, clock)

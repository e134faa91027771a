"""Tests for the inventory domain rules."""

from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo

from pantry_tracker.domain.events import ItemDepleted
from pantry_tracker.domain.inventory import (
    ExpirationStatus,
    FoodCategory,
    FoodItem,
    Unit,
    consume_stock,
    days_until_expiration,
    expiration_status,
)


def _item(quantity: int) -> FoodItem:
    return FoodItem(
        id=1,
        name="Yogurt",
        quantity=quantity,
        unit=Unit.PIECE,
        category=FoodCategory.DAIRY,
        expiration_date=date(2026, 10, 25),
        auto_consume=False,
        daily_consumption_amount=0,
        daily_consumption_unit=Unit.PIECE,
        created_at=datetime(2026, 10, 19, tzinfo=UTC),
    )


def test_days_until_expiration_rounds_up_partial_days() -> None:
    now = datetime(2026, 10, 19, 9, 0, tzinfo=UTC)

    assert days_until_expiration(date(2026, 10, 21), now) == 2
    assert days_until_expiration(date(2026, 10, 19), now) == 0
    assert days_until_expiration(date(2026, 10, 18), now) == -1


def test_days_until_expiration_uses_local_midnight() -> None:
    now = datetime(2026, 10, 19, 23, 30, tzinfo=ZoneInfo("Europe/Berlin"))

    assert days_until_expiration(date(2026, 10, 20), now) == 1
    assert days_until_expiration(now.date() + timedelta(days=3), now) == 3


def test_expiration_status_bands() -> None:
    assert expiration_status(-1) == ExpirationStatus.EXPIRED
    assert expiration_status(0) == ExpirationStatus.DANGER
    assert expiration_status(1) == ExpirationStatus.DANGER
    assert expiration_status(3) == ExpirationStatus.WARNING
    assert expiration_status(4) == ExpirationStatus.FRESH


def test_consume_stock_clamps_and_raises_depletion_once() -> None:
    emptied, events = consume_stock(_item(3), 10)
    again, more_events = consume_stock(emptied, 1)

    assert emptied.quantity == 0
    assert events == [ItemDepleted(food_item_id=1, name="Yogurt", unit=Unit.PIECE)]
    assert again.quantity == 0
    assert more_events == []


def test_consume_stock_partial() -> None:
    updated, events = consume_stock(_item(3), 1)

    assert updated.quantity == 2
    assert events == []

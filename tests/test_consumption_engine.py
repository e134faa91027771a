"""Tests for the daily automatic consumption engine."""

import asyncio
from dataclasses import dataclass, replace
from datetime import datetime, timedelta

import pytest

from pantry_tracker.adapters.memory_repositories import InMemoryNotificationRepository
from pantry_tracker.containers import AppContainer, Repositories, wire_container
from pantry_tracker.domain.errors import InternalError
from pantry_tracker.domain.notifications import Notification, NotificationType
from pantry_tracker.services.consumption import ConsumptionEngine
from tests.conftest import (
    FIXED_NOW,
    FailingCartRepository,
    StaleListingRepository,
    food_payload,
)

TODAY = FIXED_NOW.date()


def _auto_item(container: AppContainer, **overrides: object):
    payload = food_payload(
        auto_consume=True,
        daily_consumption_amount=1,
        expiration_date=TODAY + timedelta(days=10),
    )
    payload.update(overrides)
    return container.inventory_service.create_food_item(payload)


def _types(container: AppContainer) -> list[NotificationType]:
    notifications = sorted(
        container.notification_service.list_notifications(), key=lambda n: n.id
    )
    return [notification.type for notification in notifications]


def test_oldest_item_in_group_is_consumed_first(container: AppContainer) -> None:
    later = _auto_item(container, quantity=10, expiration_date=TODAY + timedelta(days=8))
    sooner = _auto_item(container, quantity=10, expiration_date=TODAY + timedelta(days=6))

    report = container.consumption_engine.process_automatic_consumption()

    service = container.inventory_service
    assert service.get_food_item(sooner.id).quantity == 9
    assert service.get_food_item(later.id).quantity == 10
    assert [step.food_item_id for step in report.consumed] == [sooner.id]


def test_partial_head_stops_the_group(container: AppContainer) -> None:
    item_a = _auto_item(
        container,
        quantity=2,
        daily_consumption_amount=5,
        expiration_date=TODAY + timedelta(days=1),
    )
    item_b = _auto_item(
        container,
        quantity=10,
        daily_consumption_amount=5,
        expiration_date=TODAY + timedelta(days=5),
    )

    report = container.consumption_engine.process_automatic_consumption()

    service = container.inventory_service
    assert service.get_food_item(item_a.id).quantity == 0
    assert service.get_food_item(item_b.id).quantity == 10
    assert len(report.consumed) == 1
    assert report.consumed[0].amount == 2
    assert report.consumed[0].depleted is True
    assert len(container.cart_service.list_cart()) == 1


def test_depletion_notification_precedes_auto_consumed(
    container: AppContainer,
) -> None:
    item = _auto_item(
        container,
        name="Bread",
        quantity=2,
        daily_consumption_amount=2,
        unit="piece",
        daily_consumption_unit="serving",
    )

    container.consumption_engine.process_automatic_consumption()

    assert _types(container) == [NotificationType.DEPLETED, NotificationType.AUTO_CONSUMED]
    auto = container.notification_service.list_notifications()[0]
    assert auto.food_item_id == item.id
    assert "Bread" in auto.message
    assert "2 serving" in auto.message


def test_engine_has_no_memory_between_runs(container: AppContainer) -> None:
    item = _auto_item(container, quantity=10, daily_consumption_amount=3)

    container.consumption_engine.process_automatic_consumption()
    container.consumption_engine.process_automatic_consumption()

    assert container.inventory_service.get_food_item(item.id).quantity == 4
    assert _types(container).count(NotificationType.AUTO_CONSUMED) == 2


def test_groups_match_names_exactly(container: AppContainer) -> None:
    upper = _auto_item(container, name="Milk", quantity=4)
    lower = _auto_item(container, name="milk", quantity=4)

    report = container.consumption_engine.process_automatic_consumption()

    service = container.inventory_service
    assert service.get_food_item(upper.id).quantity == 3
    assert service.get_food_item(lower.id).quantity == 3
    assert [step.name for step in report.consumed] == ["Milk", "milk"]


def test_ineligible_items_are_ignored(container: AppContainer) -> None:
    manual = container.inventory_service.create_food_item(food_payload(quantity=4))
    zero_rate = _auto_item(container, name="Juice", daily_consumption_amount=0)

    report = container.consumption_engine.process_automatic_consumption()

    service = container.inventory_service
    assert report.consumed == []
    assert service.get_food_item(manual.id).quantity == 4
    assert service.get_food_item(zero_rate.id).quantity == zero_rate.quantity
    assert container.notification_service.list_notifications() == []


def test_empty_head_is_skipped_for_next_item(container: AppContainer) -> None:
    empty = _auto_item(container, quantity=0, expiration_date=TODAY + timedelta(days=1))
    stocked = _auto_item(container, quantity=6, expiration_date=TODAY + timedelta(days=4))

    container.consumption_engine.process_automatic_consumption()

    service = container.inventory_service
    assert service.get_food_item(empty.id).quantity == 0
    assert service.get_food_item(stocked.id).quantity == 5
    assert container.cart_service.list_cart() == []


def test_equal_expiration_keeps_registration_order(container: AppContainer) -> None:
    first = _auto_item(container, quantity=3)
    second = _auto_item(container, quantity=3)

    container.consumption_engine.process_automatic_consumption()

    service = container.inventory_service
    assert service.get_food_item(first.id).quantity == 2
    assert service.get_food_item(second.id).quantity == 3


def test_vanished_item_is_skipped(settings, clock, repositories: Repositories) -> None:
    food_items = StaleListingRepository()
    container = wire_container(
        settings,
        replace(repositories, food_items=food_items),
        clock,
    )
    survivor = _auto_item(container, quantity=5, expiration_date=TODAY + timedelta(days=9))
    food_items.ghosts.append(replace(survivor, id=404, expiration_date=TODAY))

    report = ConsumptionEngine(container.inventory_service).process_automatic_consumption()

    assert report.skipped_item_ids == [404]
    assert container.inventory_service.get_food_item(survivor.id).quantity == 4


@dataclass
class _RejectingAutoConsumedRepository(InMemoryNotificationRepository):
    def create_notification(  # noqa: PLR0913
        self,
        food_item_id: int | None,
        type: NotificationType,  # noqa: A002
        message: str,
        is_read: bool,
        created_at: datetime,
    ) -> Notification:
        if type == NotificationType.AUTO_CONSUMED:
            raise InternalError("notification storage unavailable")
        return super().create_notification(
            food_item_id, type, message, is_read, created_at
        )


def test_failed_pass_leaves_collections_unchanged_and_retries_once(
    settings, clock, repositories: Repositories
) -> None:
    cart = FailingCartRepository()
    container = wire_container(settings, replace(repositories, cart=cart), clock)
    apple = _auto_item(container, name="Apple", quantity=10)
    bread = _auto_item(container, name="Bread", quantity=1)

    async def run_engine():
        return container.consumption_engine.process_automatic_consumption()

    with pytest.raises(InternalError):
        asyncio.run(container.trigger_gate.run(run_engine))

    service = container.inventory_service
    assert service.get_food_item(apple.id).quantity == 10
    assert service.get_food_item(bread.id).quantity == 1
    assert container.notification_service.list_notifications() == []
    assert container.cart_service.list_cart() == []
    assert repositories.day_marker.get_last_processed_day() is None

    cart.fail = False
    retried = asyncio.run(container.trigger_gate.run(run_engine))
    repeated = asyncio.run(container.trigger_gate.run(run_engine))

    assert retried.ran is True
    assert repeated.ran is False
    assert service.get_food_item(apple.id).quantity == 9
    assert service.get_food_item(bread.id).quantity == 0
    assert [entry.name for entry in container.cart_service.list_cart()] == ["Bread"]
    assert _types(container) == [
        NotificationType.AUTO_CONSUMED,
        NotificationType.DEPLETED,
        NotificationType.AUTO_CONSUMED,
    ]


def test_failed_auto_consumed_notice_undoes_the_consumption(
    settings, clock, repositories: Repositories
) -> None:
    container = wire_container(
        settings,
        replace(repositories, notifications=_RejectingAutoConsumedRepository()),
        clock,
    )
    item = _auto_item(container, name="Bread", quantity=2, daily_consumption_amount=2)

    with pytest.raises(InternalError):
        container.consumption_engine.process_automatic_consumption()

    assert container.inventory_service.get_food_item(item.id).quantity == 2
    assert container.notification_service.list_notifications() == []
    assert container.cart_service.list_cart() == []

"""Food inventory service: validation, CRUD and manual consumption."""

import logging
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from typing import Protocol

from pantry_tracker.domain.errors import (
    FieldError,
    InvalidArgumentError,
    NotFoundError,
    ValidationError,
)
from pantry_tracker.domain.events import DomainEvent
from pantry_tracker.domain.inventory import (
    WARNING_DAYS,
    FoodCategory,
    FoodItem,
    InventorySummary,
    Unit,
    calendar_days_until,
    consume_stock,
    expiration_events,
    summarize,
)
from pantry_tracker.services.clock import Clock
from pantry_tracker.services.events import DispatchResult, EventDispatcher

_logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = (
    "name",
    "quantity",
    "unit",
    "category",
    "expiration_date",
    "daily_consumption_unit",
)
_DEFAULTS: dict[str, object] = {"auto_consume": False, "daily_consumption_amount": 0}
_READ_ONLY_FIELDS = frozenset({"id", "created_at"})


class FoodItemRepository(Protocol):
    """Persistence interface for food items."""

    def list_food_items(self) -> list[FoodItem]:
        """Return all food items in id order."""

    def get_food_item(self, food_item_id: int) -> FoodItem | None:
        """Return a food item by id, if present."""

    def create_food_item(
        self, fields: dict[str, object], created_at: datetime
    ) -> FoodItem:
        """Insert a food item and return it with its id."""

    def update_food_item(
        self, food_item_id: int, fields: dict[str, object]
    ) -> FoodItem | None:
        """Merge fields into a food item; None when it does not exist."""

    def delete_food_item(self, food_item_id: int) -> bool:
        """Delete a food item; False when it does not exist."""


class ListSort(StrEnum):
    """Orderings offered by the food item listing."""

    EXPIRATION = "expiration"
    RECENT = "recent"
    NAME = "name"


@dataclass
class InventoryService:
    """Application service for food items.

    Every public mutation runs under ``lock``, which is shared with the
    notification and cart services so a mutation and its cascade appear
    atomic to other callers.
    """

    repository: FoodItemRepository
    dispatcher: EventDispatcher
    clock: Clock
    expiration_warning_days: int = WARNING_DAYS
    lock: threading.RLock = field(default_factory=threading.RLock)

    def list_food_items(
        self,
        search: str | None = None,
        category: FoodCategory | None = None,
        sort: ListSort | None = None,
    ) -> list[FoodItem]:
        """Return food items, optionally filtered by name and category."""
        with self.lock:
            items = self.repository.list_food_items()
        if search:
            needle = search.casefold()
            items = [item for item in items if needle in item.name.casefold()]
        if category is not None:
            items = [item for item in items if item.category == category]
        if sort is not None:
            items = sorted(items, key=_SORT_KEYS[sort][0], reverse=_SORT_KEYS[sort][1])
        return items

    def get_food_item(self, food_item_id: int) -> FoodItem:
        """Return a food item or raise NotFoundError."""
        with self.lock:
            item = self.repository.get_food_item(food_item_id)
        if item is None:
            raise NotFoundError("Food item", food_item_id)
        return item

    def create_food_item(self, payload: dict[str, object]) -> FoodItem:
        """Validate and register a new item, warning when it expires soon."""
        now = self.clock.now()
        fields = validate_food_fields(payload, now.date(), partial=False)
        with self.lock:
            item = self.repository.create_food_item(fields, created_at=now)
            events = expiration_events(item, now, self.expiration_warning_days)
            try:
                self.dispatcher.dispatch(events)
            except Exception:
                self.repository.delete_food_item(item.id)
                raise
        _logger.info(
            "Food item created", extra={"food_item_id": item.id, "events": len(events)}
        )
        return item

    def update_food_item(
        self, food_item_id: int, payload: dict[str, object]
    ) -> FoodItem:
        """Merge validated fields into an existing item."""
        fields = validate_food_fields(payload, self.clock.today(), partial=True)
        with self.lock:
            updated = self.repository.update_food_item(food_item_id, fields)
        if updated is None:
            raise NotFoundError("Food item", food_item_id)
        return updated

    def delete_food_item(self, food_item_id: int) -> bool:
        """Delete an item; False when the id is unknown."""
        with self.lock:
            deleted = self.repository.delete_food_item(food_item_id)
        if deleted:
            _logger.info("Food item deleted", extra={"food_item_id": food_item_id})
        return deleted

    def consume_food_item(self, food_item_id: int, amount: int) -> FoodItem:
        """Consume stock, routing the item to the cart when it runs out."""
        updated, _ = self.consume_with_events(food_item_id, amount)
        return updated

    def consume_with_events(
        self,
        food_item_id: int,
        amount: int,
        follow_up: Sequence[DomainEvent] = (),
    ) -> tuple[FoodItem, DispatchResult]:
        """Consume stock and dispatch its events together with ``follow_up``.

        The consumption's own events are dispatched first. When any of them
        fails, the dispatched records are removed and the previous quantity is
        restored before the error propagates.
        """
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise InvalidArgumentError("Amount must be a positive number")
        with self.lock:
            item = self.get_food_item(food_item_id)
            consumed, events = consume_stock(item, amount)
            stored = self.repository.update_food_item(
                food_item_id, {"quantity": consumed.quantity}
            )
            if stored is None:
                raise NotFoundError("Food item", food_item_id)
            try:
                dispatched = self.dispatcher.dispatch([*events, *follow_up])
            except Exception:
                self.restore_quantity(food_item_id, item.quantity)
                raise
        return stored, dispatched

    def restore_quantity(self, food_item_id: int, quantity: int) -> None:
        """Put back a quantity recorded before a consumption that was undone."""
        with self.lock:
            self.repository.update_food_item(food_item_id, {"quantity": quantity})

    def summary(self) -> InventorySummary:
        """Return dashboard counters for the current day."""
        with self.lock:
            items = self.repository.list_food_items()
        return summarize(items, self.clock.today(), self.expiration_warning_days)

    def days_until_expiration(self, item: FoodItem) -> int:
        """Return whole days left before the item expires."""
        return calendar_days_until(item.expiration_date, self.clock.today())


_SORT_KEYS: dict[ListSort, tuple[Callable[[FoodItem], object], bool]] = {
    ListSort.EXPIRATION: (lambda item: item.expiration_date, False),
    ListSort.RECENT: (lambda item: item.created_at, True),
    ListSort.NAME: (lambda item: item.name.casefold(), False),
}


def validate_food_fields(
    payload: dict[str, object], today: date, *, partial: bool
) -> dict[str, object]:
    """Validate and normalize food item fields.

    Raises ValidationError listing every failed field. With ``partial`` set,
    missing fields are allowed and no defaults are filled in.
    """
    errors: list[FieldError] = []
    for key in payload:
        if key in _READ_ONLY_FIELDS:
            errors.append(FieldError(key, "Field is read-only"))
        elif key not in _FIELD_PARSERS:
            errors.append(FieldError(key, "Unknown field"))
        elif partial and payload[key] is None:
            errors.append(FieldError(key, "Field cannot be null"))
    if not partial:
        errors.extend(
            FieldError(key, "Field is required")
            for key in _REQUIRED_FIELDS
            if payload.get(key) is None
        )

    cleaned: dict[str, object] = {}
    for key, parser in _FIELD_PARSERS.items():
        value = payload.get(key)
        if value is None:
            continue
        try:
            cleaned[key] = parser(value, today)
        except ValueError as exc:
            errors.append(FieldError(key, str(exc)))

    if errors:
        raise ValidationError(errors)
    if not partial:
        for key, default in _DEFAULTS.items():
            cleaned.setdefault(key, default)
    return cleaned


def _parse_name(value: object, today: date) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError("Name must not be empty")
    return value.strip()


def _parse_non_negative_int(label: str) -> Callable[[object, date], int]:
    def parse(value: object, today: date) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"{label} must be an integer")
        if value < 0:
            raise ValueError(f"{label} cannot be less than 0")
        return value

    return parse


def _parse_unit(value: object, today: date) -> Unit:
    try:
        return Unit(value)
    except ValueError:
        raise ValueError(f"Unknown unit: {value}") from None


def _parse_category(value: object, today: date) -> FoodCategory:
    try:
        return FoodCategory(value)
    except ValueError:
        raise ValueError(f"Unknown category: {value}") from None


def _parse_expiration_date(value: object, today: date) -> date:
    if isinstance(value, datetime):
        parsed = value.date()
    elif isinstance(value, date):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = date.fromisoformat(value[:10])
        except ValueError:
            raise ValueError("Expiration date must be an ISO date") from None
    else:
        raise ValueError("Expiration date must be an ISO date")
    if parsed < today:
        raise ValueError("Expiration date must be today or later")
    return parsed


def _parse_bool(value: object, today: date) -> bool:
    if not isinstance(value, bool):
        raise ValueError("Must be true or false")
    return value


_FIELD_PARSERS: dict[str, Callable[[object, date], object]] = {
    "name": _parse_name,
    "quantity": _parse_non_negative_int("Quantity"),
    "unit": _parse_unit,
    "category": _parse_category,
    "expiration_date": _parse_expiration_date,
    "auto_consume": _parse_bool,
    "daily_consumption_amount": _parse_non_negative_int("Daily consumption amount"),
    "daily_consumption_unit": _parse_unit,
}

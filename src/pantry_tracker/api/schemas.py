"""Pydantic request and response models for the REST API."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from pantry_tracker.domain.cart import ShoppingCartItem
from pantry_tracker.domain.inventory import (
    ExpirationStatus,
    FoodCategory,
    FoodItem,
    InventorySummary,
    Unit,
    expiration_status,
)
from pantry_tracker.domain.notifications import Notification, NotificationType
from pantry_tracker.services.consumption import AutoConsumption, ConsumptionReport


class ApiModel(BaseModel):
    """Base model emitting camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RequestModel(ApiModel):
    """Base for request bodies; unknown and read-only keys are rejected."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid"
    )


class FoodItemCreate(RequestModel):
    """Payload for registering a food item."""

    name: str
    quantity: int
    unit: Unit
    category: FoodCategory
    expiration_date: date
    auto_consume: bool = False
    daily_consumption_amount: int = 0
    daily_consumption_unit: Unit


class FoodItemUpdate(RequestModel):
    """Partial update payload for a food item."""

    name: str | None = None
    quantity: int | None = None
    unit: Unit | None = None
    category: FoodCategory | None = None
    expiration_date: date | None = None
    auto_consume: bool | None = None
    daily_consumption_amount: int | None = None
    daily_consumption_unit: Unit | None = None


class ConsumeRequest(RequestModel):
    """Payload for a manual consumption."""

    amount: int


class CartItemCreate(RequestModel):
    """Payload for adding a shopping cart entry."""

    name: str
    quantity: int
    unit: Unit


class FoodItemResponse(ApiModel):
    """Food item as returned by the API."""

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
    days_until_expiration: int
    expiration_status: ExpirationStatus

    @classmethod
    def from_domain(cls, item: FoodItem, days_left: int) -> "FoodItemResponse":
        return cls(
            id=item.id,
            name=item.name,
            quantity=item.quantity,
            unit=item.unit,
            category=item.category,
            expiration_date=item.expiration_date,
            auto_consume=item.auto_consume,
            daily_consumption_amount=item.daily_consumption_amount,
            daily_consumption_unit=item.daily_consumption_unit,
            created_at=item.created_at,
            days_until_expiration=days_left,
            expiration_status=expiration_status(days_left),
        )


class InventorySummaryResponse(ApiModel):
    """Dashboard counters."""

    total_items: int
    expiring_items: int
    depleted_items: int

    @classmethod
    def from_domain(cls, summary: InventorySummary) -> "InventorySummaryResponse":
        return cls(
            total_items=summary.total_items,
            expiring_items=summary.expiring_items,
            depleted_items=summary.depleted_items,
        )


class NotificationResponse(ApiModel):
    """Notification as returned by the API."""

    id: int
    food_item_id: int | None
    type: NotificationType
    message: str
    is_read: bool
    created_at: datetime

    @classmethod
    def from_domain(cls, notification: Notification) -> "NotificationResponse":
        return cls(
            id=notification.id,
            food_item_id=notification.food_item_id,
            type=notification.type,
            message=notification.message,
            is_read=notification.is_read,
            created_at=notification.created_at,
        )


class CartItemResponse(ApiModel):
    """Shopping cart entry as returned by the API."""

    id: int
    name: str
    quantity: int
    unit: Unit
    added_at: datetime

    @classmethod
    def from_domain(cls, item: ShoppingCartItem) -> "CartItemResponse":
        return cls(
            id=item.id,
            name=item.name,
            quantity=item.quantity,
            unit=item.unit,
            added_at=item.added_at,
        )


class AutoConsumptionEntry(ApiModel):
    """One consumption step of the daily routine."""

    food_item_id: int
    name: str
    amount: int
    unit: Unit
    depleted: bool

    @classmethod
    def from_domain(cls, step: AutoConsumption) -> "AutoConsumptionEntry":
        return cls(
            food_item_id=step.food_item_id,
            name=step.name,
            amount=step.amount,
            unit=step.unit,
            depleted=step.depleted,
        )


class AutoConsumptionResponse(ApiModel):
    """Result of an automatic consumption pass."""

    message: str
    consumed: list[AutoConsumptionEntry]
    skipped_item_ids: list[int]

    @classmethod
    def from_report(cls, report: ConsumptionReport) -> "AutoConsumptionResponse":
        return cls(
            message="Auto consumption processed successfully",
            consumed=[AutoConsumptionEntry.from_domain(step) for step in report.consumed],
            skipped_item_ids=report.skipped_item_ids,
        )


class DailyConsumptionResponse(ApiModel):
    """Result of the gated daily trigger."""

    day: date
    processed: bool
    consumed: list[AutoConsumptionEntry]


class MessageResponse(ApiModel):
    """Plain acknowledgement."""

    message: str

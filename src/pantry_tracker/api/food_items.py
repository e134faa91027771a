"""Food item endpoints, including manual and automatic consumption."""

from typing import TYPE_CHECKING

from fastapi import APIRouter, HTTPException, Request, Response, status

from pantry_tracker.api.schemas import (
    AutoConsumptionEntry,
    AutoConsumptionResponse,
    ConsumeRequest,
    DailyConsumptionResponse,
    FoodItemCreate,
    FoodItemResponse,
    FoodItemUpdate,
    InventorySummaryResponse,
)
from pantry_tracker.domain.inventory import FoodCategory, FoodItem
from pantry_tracker.services.consumption import ConsumptionReport
from pantry_tracker.services.inventory import ListSort

if TYPE_CHECKING:
    from pantry_tracker.containers import AppContainer

router = APIRouter(prefix="/api", tags=["food-items"])


def _container(request: Request) -> "AppContainer":
    return request.app.state.container


def _respond(container: "AppContainer", item: FoodItem) -> FoodItemResponse:
    days_left = container.inventory_service.days_until_expiration(item)
    return FoodItemResponse.from_domain(item, days_left)


@router.get("/food-items")
async def list_food_items(
    request: Request,
    search: str | None = None,
    category: FoodCategory | None = None,
    sort: ListSort | None = None,
) -> list[FoodItemResponse]:
    """Return food items, optionally searched, filtered and sorted."""
    container = _container(request)
    items = container.inventory_service.list_food_items(
        search=search, category=category, sort=sort
    )
    return [_respond(container, item) for item in items]


@router.get("/food-items/summary")
async def inventory_summary(request: Request) -> InventorySummaryResponse:
    """Return total, expiring and depleted counts."""
    summary = _container(request).inventory_service.summary()
    return InventorySummaryResponse.from_domain(summary)


@router.get("/food-items/{food_item_id}")
async def get_food_item(food_item_id: int, request: Request) -> FoodItemResponse:
    """Return a single food item."""
    container = _container(request)
    return _respond(container, container.inventory_service.get_food_item(food_item_id))


@router.post("/food-items", status_code=status.HTTP_201_CREATED)
async def create_food_item(
    payload: FoodItemCreate, request: Request
) -> FoodItemResponse:
    """Register a food item."""
    container = _container(request)
    item = container.inventory_service.create_food_item(payload.model_dump())
    return _respond(container, item)


@router.patch("/food-items/{food_item_id}")
async def update_food_item(
    food_item_id: int, payload: FoodItemUpdate, request: Request
) -> FoodItemResponse:
    """Apply a partial update to a food item."""
    container = _container(request)
    item = container.inventory_service.update_food_item(
        food_item_id, payload.model_dump(exclude_unset=True)
    )
    return _respond(container, item)


@router.delete("/food-items/{food_item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_food_item(food_item_id: int, request: Request) -> Response:
    """Delete a food item."""
    if not _container(request).inventory_service.delete_food_item(food_item_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Food item not found"
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/food-items/{food_item_id}/consume")
async def consume_food_item(
    food_item_id: int, payload: ConsumeRequest, request: Request
) -> FoodItemResponse:
    """Consume an amount of a food item."""
    container = _container(request)
    item = container.inventory_service.consume_food_item(food_item_id, payload.amount)
    return _respond(container, item)


@router.post("/process-auto-consumption")
async def process_auto_consumption(request: Request) -> AutoConsumptionResponse:
    """Run one automatic consumption pass, without the daily gate."""
    report = _container(request).consumption_engine.process_automatic_consumption()
    return AutoConsumptionResponse.from_report(report)


@router.post("/auto-consumption/daily")
async def process_daily_auto_consumption(
    request: Request,
) -> DailyConsumptionResponse:
    """Run automatic consumption unless it already ran today."""
    container = _container(request)

    async def run_engine() -> ConsumptionReport:
        return container.consumption_engine.process_automatic_consumption()

    outcome = await container.trigger_gate.run(run_engine)
    consumed = outcome.result.consumed if outcome.result is not None else []
    return DailyConsumptionResponse(
        day=outcome.day,
        processed=outcome.ran,
        consumed=[AutoConsumptionEntry.from_domain(step) for step in consumed],
    )

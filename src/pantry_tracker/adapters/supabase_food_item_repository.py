"""Supabase repository for food items."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from supabase import Client

from pantry_tracker.domain.errors import InternalError
from pantry_tracker.domain.inventory import FoodCategory, FoodItem, Unit
from pantry_tracker.services.inventory import FoodItemRepository


@dataclass
class SupabaseFoodItemRepository(FoodItemRepository):
    """Supabase-backed food item repository."""

    client: Client

    def list_food_items(self) -> list[FoodItem]:
        """Return all food items in id order."""
        response = self.client.table("food_items").select("*").order("id").execute()
        return [_parse_food_item(row) for row in response.data or []]

    def get_food_item(self, food_item_id: int) -> FoodItem | None:
        """Return a food item by id, if present."""
        response = (
            self.client.table("food_items")
            .select("*")
            .eq("id", food_item_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_food_item(response.data[0])

    def create_food_item(
        self, fields: dict[str, object], created_at: datetime
    ) -> FoodItem:
        """Insert a food item row and return it."""
        response = (
            self.client.table("food_items")
            .insert({**serialize_fields(fields), "created_at": created_at.isoformat()})
            .execute()
        )
        if not response.data:
            raise InternalError("Failed to create food item")
        return _parse_food_item(response.data[0])

    def update_food_item(
        self, food_item_id: int, fields: dict[str, object]
    ) -> FoodItem | None:
        """Update a food item row; None when no row matched."""
        response = (
            self.client.table("food_items")
            .update(serialize_fields(fields))
            .eq("id", food_item_id)
            .execute()
        )
        if not response.data:
            return None
        return _parse_food_item(response.data[0])

    def delete_food_item(self, food_item_id: int) -> bool:
        """Delete a food item row."""
        response = (
            self.client.table("food_items").delete().eq("id", food_item_id).execute()
        )
        return bool(response.data)


def serialize_fields(fields: dict[str, object]) -> dict[str, object]:
    """Convert enums and dates into JSON-friendly column values."""
    serialized: dict[str, object] = {}
    for key, value in fields.items():
        if isinstance(value, Enum):
            serialized[key] = value.value
        elif isinstance(value, date):
            serialized[key] = value.isoformat()
        else:
            serialized[key] = value
    return serialized


def _parse_food_item(row: dict[str, object]) -> FoodItem:
    """Parse a food_items row into a domain model."""
    return FoodItem(
        id=int(row["id"]),
        name=str(row.get("name", "")),
        quantity=int(row.get("quantity", 0)),
        unit=Unit(row["unit"]),
        category=FoodCategory(row["category"]),
        expiration_date=date.fromisoformat(str(row["expiration_date"])[:10]),
        auto_consume=bool(row.get("auto_consume") or False),
        daily_consumption_amount=int(row.get("daily_consumption_amount") or 0),
        daily_consumption_unit=Unit(row["daily_consumption_unit"]),
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )

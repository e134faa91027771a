"""Supabase repository for the shopping cart."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from pantry_tracker.domain.cart import ShoppingCartItem
from pantry_tracker.domain.errors import InternalError
from pantry_tracker.domain.inventory import Unit
from pantry_tracker.services.cart import CartRepository


@dataclass
class SupabaseCartRepository(CartRepository):
    """Supabase-backed shopping cart repository."""

    client: Client

    def list_cart_items(self) -> list[ShoppingCartItem]:
        """Return cart rows in id order."""
        response = (
            self.client.table("shopping_cart_items").select("*").order("id").execute()
        )
        return [_parse_cart_item(row) for row in response.data or []]

    def create_cart_item(
        self, name: str, quantity: int, unit: Unit, added_at: datetime
    ) -> ShoppingCartItem:
        """Insert a cart row and return it."""
        response = (
            self.client.table("shopping_cart_items")
            .insert(
                {
                    "name": name,
                    "quantity": quantity,
                    "unit": unit.value,
                    "added_at": added_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise InternalError("Failed to add shopping cart item")
        return _parse_cart_item(response.data[0])

    def delete_cart_item(self, cart_item_id: int) -> bool:
        """Delete a cart row."""
        response = (
            self.client.table("shopping_cart_items")
            .delete()
            .eq("id", cart_item_id)
            .execute()
        )
        return bool(response.data)


def _parse_cart_item(row: dict[str, object]) -> ShoppingCartItem:
    return ShoppingCartItem(
        id=int(row["id"]),
        name=str(row.get("name", "")),
        quantity=int(row.get("quantity", 0)),
        unit=Unit(row["unit"]),
        added_at=datetime.fromisoformat(str(row["added_at"])),
    )

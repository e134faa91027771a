"""Shopping cart endpoints."""

from typing import TYPE_CHECKING

from fastapi import APIRouter, HTTPException, Request, Response, status

from pantry_tracker.api.schemas import CartItemCreate, CartItemResponse

if TYPE_CHECKING:
    from pantry_tracker.containers import AppContainer

router = APIRouter(prefix="/api/shopping-cart", tags=["shopping-cart"])


@router.get("")
async def list_cart(request: Request) -> list[CartItemResponse]:
    """Return shopping cart entries."""
    container: AppContainer = request.app.state.container
    return [
        CartItemResponse.from_domain(item)
        for item in container.cart_service.list_cart()
    ]


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_to_cart(payload: CartItemCreate, request: Request) -> CartItemResponse:
    """Add an entry to the shopping cart."""
    container: AppContainer = request.app.state.container
    item = container.cart_service.add_to_cart(payload.model_dump())
    return CartItemResponse.from_domain(item)


@router.delete("/{cart_item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_from_cart(cart_item_id: int, request: Request) -> Response:
    """Remove an entry from the shopping cart."""
    container: AppContainer = request.app.state.container
    if not container.cart_service.remove_from_cart(cart_item_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Shopping cart item not found",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)

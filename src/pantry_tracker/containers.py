"""Dependency container wiring for the application."""

import threading
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from pantry_tracker.adapters.memory_repositories import (
    InMemoryCartRepository,
    InMemoryDayMarkerRepository,
    InMemoryFoodItemRepository,
    InMemoryNotificationRepository,
)
from pantry_tracker.adapters.supabase_cart_repository import SupabaseCartRepository
from pantry_tracker.adapters.supabase_day_marker_repository import (
    SupabaseDayMarkerRepository,
)
from pantry_tracker.adapters.supabase_food_item_repository import (
    SupabaseFoodItemRepository,
)
from pantry_tracker.adapters.supabase_notification_repository import (
    SupabaseNotificationRepository,
)
from pantry_tracker.config import Settings
from pantry_tracker.services.cart import CartRepository, CartService
from pantry_tracker.services.clock import Clock, SystemClock
from pantry_tracker.services.consumption import ConsumptionEngine
from pantry_tracker.services.events import EventDispatcher
from pantry_tracker.services.inventory import FoodItemRepository, InventoryService
from pantry_tracker.services.notifications import (
    NotificationRepository,
    NotificationService,
)
from pantry_tracker.services.trigger import DayMarkerRepository, TriggerGate


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    clock: Clock
    inventory_service: InventoryService
    notification_service: NotificationService
    cart_service: CartService
    consumption_engine: ConsumptionEngine
    trigger_gate: TriggerGate
    close_resources: Callable[[], Awaitable[None]]


@dataclass(frozen=True)
class Repositories:
    """One repository per collection, sharing a backend."""

    food_items: FoodItemRepository
    notifications: NotificationRepository
    cart: CartRepository
    day_marker: DayMarkerRepository


def build_repositories(settings: Settings) -> Repositories:
    """Create repositories for the configured storage backend."""
    if settings.storage_backend == "supabase":
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return Repositories(
            food_items=SupabaseFoodItemRepository(client),
            notifications=SupabaseNotificationRepository(client),
            cart=SupabaseCartRepository(client),
            day_marker=SupabaseDayMarkerRepository(client),
        )
    return Repositories(
        food_items=InMemoryFoodItemRepository(),
        notifications=InMemoryNotificationRepository(),
        cart=InMemoryCartRepository(),
        day_marker=InMemoryDayMarkerRepository(),
    )


def wire_container(
    settings: Settings, repositories: Repositories, clock: Clock
) -> AppContainer:
    """Assemble services around already constructed repositories."""
    store_lock = threading.RLock()
    notification_service = NotificationService(
        repository=repositories.notifications, clock=clock, lock=store_lock
    )
    cart_service = CartService(
        repository=repositories.cart, clock=clock, lock=store_lock
    )
    dispatcher = EventDispatcher(
        notification_service=notification_service, cart_service=cart_service
    )
    inventory_service = InventoryService(
        repository=repositories.food_items,
        dispatcher=dispatcher,
        clock=clock,
        expiration_warning_days=settings.expiration_warning_days,
        lock=store_lock,
    )
    consumption_engine = ConsumptionEngine(inventory_service)
    trigger_gate = TriggerGate(marker_repository=repositories.day_marker, clock=clock)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        clock=clock,
        inventory_service=inventory_service,
        notification_service=notification_service,
        cart_service=cart_service,
        consumption_engine=consumption_engine,
        trigger_gate=trigger_gate,
        close_resources=close_resources,
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    return wire_container(
        resolved_settings,
        build_repositories(resolved_settings),
        SystemClock(resolved_settings.timezone),
    )

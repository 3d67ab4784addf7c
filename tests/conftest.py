"""Pytest configuration and fixtures."""

from datetime import timedelta
from decimal import Decimal
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from fakeredis import FakeServer
from fakeredis.aioredis import FakeRedis

from order_engine.engine.lifecycle import OrderLifecycleManager
from order_engine.engine.outbox import Outbox
from order_engine.models.menu import MenuItem
from order_engine.models.order import CreateOrderRequest, OrderType
from order_engine.models.promo import DiscountType, PromoCode
from order_engine.models.restaurant import (
    DeliverySettings,
    OrderingSettings,
    Restaurant,
    RestaurantSettings,
    TaxSettings,
)
from order_engine.state.manager import StateManager
from order_engine.state.repository import OrderRepository
from order_engine.utils.clock import utc_now

RESTAURANT_ID = "rest_1"


@pytest_asyncio.fixture
async def state_manager() -> AsyncGenerator[StateManager, None]:
    """Create a state manager over an in-process Redis."""
    manager = StateManager(FakeRedis(server=FakeServer(), decode_responses=True))
    yield manager
    await manager.disconnect()


@pytest.fixture
def repository(state_manager: StateManager) -> OrderRepository:
    return OrderRepository(state_manager)


@pytest.fixture
def lifecycle(state_manager: StateManager, repository: OrderRepository) -> OrderLifecycleManager:
    return OrderLifecycleManager(state_manager, repository=repository)


@pytest.fixture
def outbox(state_manager: StateManager) -> Outbox:
    return Outbox(state_manager)


# Sample data fixtures


@pytest.fixture
def sample_restaurant() -> Restaurant:
    """Restaurant with a 2.50 delivery fee, free over 50, 20% tax."""
    return Restaurant(
        id=RESTAURANT_ID,
        name="Royal Spice Kitchen",
        settings=RestaurantSettings(
            delivery=DeliverySettings(
                enabled=True,
                fee=Decimal("2.50"),
                free_delivery_minimum=Decimal("50.00"),
                estimated_minutes=40,
            ),
            ordering=OrderingSettings(order_confirmation_required=True),
            tax=TaxSettings(rate=Decimal("0.20")),
        ),
    )


@pytest.fixture
def sample_menu_items() -> list[MenuItem]:
    return [
        MenuItem(
            id="curry",
            restaurant_id=RESTAURANT_ID,
            name="Chicken Curry",
            category="mains",
            price=Decimal("12.99"),
            stock_count=20,
            low_stock_threshold=5,
        ),
        MenuItem(
            id="naan",
            restaurant_id=RESTAURANT_ID,
            name="Garlic Naan",
            category="sides",
            price=Decimal("4.95"),
        ),
        MenuItem(
            id="samosa",
            restaurant_id=RESTAURANT_ID,
            name="Samosa",
            category="starters",
            price=Decimal("3.50"),
            stock_count=1,
            low_stock_threshold=0,
        ),
        MenuItem(
            id="special",
            restaurant_id=RESTAURANT_ID,
            name="Chef's Special",
            price=Decimal("18.00"),
            is_available=False,
        ),
    ]


@pytest_asyncio.fixture
async def seeded(
    repository: OrderRepository,
    sample_restaurant: Restaurant,
    sample_menu_items: list[MenuItem],
) -> Restaurant:
    """Persist the sample restaurant and its menu."""
    await repository.save_restaurant(sample_restaurant)
    for item in sample_menu_items:
        await repository.save_menu_item(item)
    return sample_restaurant


def _build_promo(code: str = "SAVE10", **overrides) -> PromoCode:
    now = utc_now()
    fields = {
        "restaurant_id": RESTAURANT_ID,
        "code": code,
        "discount_type": DiscountType.FIXED_AMOUNT,
        "value": Decimal("10.00"),
        "valid_from": now - timedelta(days=1),
        "valid_until": now + timedelta(days=1),
    }
    fields.update(overrides)
    return PromoCode(**fields)


def _build_request(
    items: list[tuple[str, int]] | None = None,
    order_type: OrderType = OrderType.DELIVERY,
    email: str = "jane@example.com",
    **overrides,
) -> CreateOrderRequest:
    """Build a creation request; defaults to 2x curry + 1x naan for delivery."""
    items = items if items is not None else [("curry", 2), ("naan", 1)]
    payload = {
        "order_type": order_type,
        "items": [{"menu_item_id": i, "quantity": q} for i, q in items],
        "customer_info": {"name": "Jane Doe", "email": email, "phone": "07700900123"},
        "delivery_address": (
            {"street": "1 High St", "city": "London", "postcode": "E1 6AN", "country": "GB"}
            if order_type == OrderType.DELIVERY
            else None
        ),
    }
    payload.update(overrides)
    return CreateOrderRequest.model_validate(payload)


@pytest.fixture
def make_promo():
    """Factory for promo codes valid from yesterday until tomorrow."""
    return _build_promo


@pytest.fixture
def make_request():
    """Factory for order creation requests."""
    return _build_request

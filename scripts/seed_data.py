"""Seed a demo restaurant, menu and promo codes."""

import asyncio
from datetime import timedelta
from decimal import Decimal

from order_engine.models.menu import MenuItem
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

RESTAURANT_ID = "royal_spice"


async def seed_restaurant(repository: OrderRepository) -> None:
    """Seed the demo restaurant and its settings."""
    print("Seeding restaurant...")

    restaurant = Restaurant(
        id=RESTAURANT_ID,
        name="Royal Spice Kitchen",
        settings=RestaurantSettings(
            delivery=DeliverySettings(
                enabled=True,
                fee=Decimal("2.50"),
                free_delivery_minimum=Decimal("50.00"),
                estimated_minutes=45,
            ),
            ordering=OrderingSettings(
                minimum_order_amount=Decimal("10.00"),
                order_confirmation_required=True,
                kitchen_printing_enabled=True,
                pickup_estimated_minutes=20,
            ),
            tax=TaxSettings(rate=Decimal("0.20")),
        ),
    )
    await repository.save_restaurant(restaurant)

    print(f"✓ {restaurant.name} seeded successfully\n")


async def seed_menu(repository: OrderRepository) -> None:
    """Seed menu items; stock is tracked for a few of them."""
    print("Seeding menu...")

    menu_items = [
        MenuItem(
            id="chicken_tikka_masala",
            restaurant_id=RESTAURANT_ID,
            name="Chicken Tikka Masala",
            category="mains",
            price=Decimal("12.99"),
            stock_count=40,
            low_stock_threshold=8,
        ),
        MenuItem(
            id="lamb_rogan_josh",
            restaurant_id=RESTAURANT_ID,
            name="Lamb Rogan Josh",
            category="mains",
            price=Decimal("14.49"),
            stock_count=25,
            low_stock_threshold=5,
        ),
        MenuItem(
            id="paneer_makhani",
            restaurant_id=RESTAURANT_ID,
            name="Paneer Makhani",
            category="mains",
            price=Decimal("11.49"),
        ),
        MenuItem(
            id="garlic_naan",
            restaurant_id=RESTAURANT_ID,
            name="Garlic Naan",
            category="sides",
            price=Decimal("2.95"),
        ),
        MenuItem(
            id="pilau_rice",
            restaurant_id=RESTAURANT_ID,
            name="Pilau Rice",
            category="sides",
            price=Decimal("3.25"),
        ),
        MenuItem(
            id="samosa_platter",
            restaurant_id=RESTAURANT_ID,
            name="Samosa Platter",
            category="starters",
            price=Decimal("5.99"),
            stock_count=15,
            low_stock_threshold=4,
        ),
        MenuItem(
            id="mango_lassi",
            restaurant_id=RESTAURANT_ID,
            name="Mango Lassi",
            category="drinks",
            price=Decimal("3.50"),
        ),
    ]

    for item in menu_items:
        await repository.save_menu_item(item)
        stock = item.stock_count if item.tracks_stock else "untracked"
        print(f"  ✓ Added {item.name} (£{item.price}, stock: {stock})")

    print("✓ Menu seeded successfully\n")


async def seed_promo_codes(repository: OrderRepository) -> None:
    """Seed promo codes."""
    print("Seeding promo codes...")

    now = utc_now()
    promo_codes = [
        PromoCode(
            restaurant_id=RESTAURANT_ID,
            code="WELCOME10",
            name="Welcome discount",
            discount_type=DiscountType.PERCENTAGE,
            value=Decimal("10"),
            max_discount_amount=Decimal("5.00"),
            max_uses_per_customer=1,
            valid_from=now,
            valid_until=now + timedelta(days=90),
        ),
        PromoCode(
            restaurant_id=RESTAURANT_ID,
            code="FEAST5",
            name="£5 off orders over £30",
            discount_type=DiscountType.FIXED_AMOUNT,
            value=Decimal("5.00"),
            min_order_amount=Decimal("30.00"),
            max_uses=100,
            valid_from=now,
            valid_until=now + timedelta(days=30),
        ),
    ]

    for promo in promo_codes:
        await repository.save_promo_code(promo)
        print(f"  ✓ Added {promo.code} ({promo.discount_type.value} {promo.value})")

    print("✓ Promo codes seeded successfully\n")


async def main() -> None:
    """Seed all demo data."""
    print("\n" + "=" * 50)
    print("  Seeding Order Engine Data")
    print("=" * 50 + "\n")

    state_manager = StateManager()
    await state_manager.connect()
    repository = OrderRepository(state_manager)

    try:
        await seed_restaurant(repository)
        await seed_menu(repository)
        await seed_promo_codes(repository)
    finally:
        await state_manager.disconnect()

    print("=" * 50)
    print("  ✓ All data seeded successfully!")
    print("=" * 50 + "\n")


if __name__ == "__main__":
    asyncio.run(main())

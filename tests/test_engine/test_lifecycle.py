"""Tests for the order lifecycle manager."""

from decimal import Decimal

import pytest

from order_engine.engine.lifecycle import OrderLifecycleManager
from order_engine.engine.outbox import Outbox
from order_engine.exceptions import (
    ConflictError,
    InvalidTransition,
    MenuItemUnavailable,
    NotFoundError,
    OutOfStock,
    ValidationError,
)
from order_engine.models.events import OrderEventType
from order_engine.models.menu import MenuItem
from order_engine.models.order import OrderFilters, OrderStatus, OrderType, PaymentStatus
from order_engine.models.restaurant import Restaurant
from order_engine.state import keys
from order_engine.state.repository import OrderRepository


async def _stock(repository: OrderRepository, menu_item_id: str) -> int | None:
    return (await repository.get_menu_item(menu_item_id)).stock_count


async def _paid_order(lifecycle: OrderLifecycleManager, make_request):
    order = await lifecycle.create_order("rest_1", make_request())
    return await lifecycle.mark_payment_succeeded(order.id, payment_reference="pi_123")


# Creation


@pytest.mark.asyncio
async def test_create_order_prices_and_persists(
    lifecycle: OrderLifecycleManager,
    repository: OrderRepository,
    seeded: Restaurant,
    make_request,
) -> None:
    """Test the delivery cart scenario end to end."""
    order = await lifecycle.create_order("rest_1", make_request())

    assert order.status == OrderStatus.PENDING
    assert order.payment_status == PaymentStatus.PENDING
    assert order.subtotal == Decimal("30.93")
    assert order.tax_amount == Decimal("6.186")
    assert order.delivery_fee == Decimal("2.50")
    assert order.discount_amount == Decimal("0")
    assert order.total == Decimal("39.616")
    assert order.total == order.subtotal + order.tax_amount + order.delivery_fee - order.discount_amount
    assert [(i.menu_item_id, i.quantity, i.unit_price) for i in order.items] == [
        ("curry", 2, Decimal("12.99")),
        ("naan", 1, Decimal("4.95")),
    ]
    assert order.items[0].line_total == Decimal("25.98")
    assert order.order_number == order.created_at.strftime("%Y%m%d") + "001"
    assert order.estimated_ready_at > order.created_at
    assert order.status_history[0].to_status == OrderStatus.PENDING

    stored = await repository.get_order(order.id)
    assert stored.model_dump() == order.model_dump()
    assert (await repository.get_order_by_number(order.order_number)).id == order.id
    assert await _stock(repository, "curry") == 18


@pytest.mark.asyncio
async def test_order_numbers_increase(
    lifecycle: OrderLifecycleManager, seeded: Restaurant, make_request
) -> None:
    first = await lifecycle.create_order("rest_1", make_request())
    second = await lifecycle.create_order("rest_1", make_request(email="sam@example.com"))

    assert second.order_number[-3:] == "002"
    assert first.order_number[:8] == second.order_number[:8]


@pytest.mark.asyncio
async def test_create_order_emits_created_event(
    lifecycle: OrderLifecycleManager, outbox: Outbox, seeded: Restaurant, make_request
) -> None:
    order = await lifecycle.create_order("rest_1", make_request())

    events = await outbox.pending()
    assert [e.event_type for e in events] == [OrderEventType.ORDER_CREATED]
    assert events[0].entity_id == str(order.id)
    assert events[0].details["order_number"] == order.order_number
    # Confirmation is required, so the ticket prints on confirmation
    assert events[0].details["print_ticket"] is False


@pytest.mark.asyncio
async def test_prints_on_creation_without_confirmation(
    lifecycle: OrderLifecycleManager,
    repository: OrderRepository,
    outbox: Outbox,
    seeded: Restaurant,
    make_request,
) -> None:
    seeded.settings.ordering.order_confirmation_required = False
    await repository.save_restaurant(seeded)

    await lifecycle.create_order("rest_1", make_request())

    events = await outbox.pending()
    assert events[0].details["print_ticket"] is True


@pytest.mark.asyncio
async def test_line_prices_frozen_after_menu_change(
    lifecycle: OrderLifecycleManager,
    repository: OrderRepository,
    seeded: Restaurant,
    sample_menu_items: list[MenuItem],
    make_request,
) -> None:
    order = await lifecycle.create_order("rest_1", make_request())

    naan = sample_menu_items[1].model_copy(update={"price": Decimal("6.50")})
    await repository.save_menu_item(naan)

    stored = await lifecycle.get_order(order.id)
    assert stored.items[1].unit_price == Decimal("4.95")
    assert stored.total == Decimal("39.616")


@pytest.mark.asyncio
async def test_out_of_stock_leaves_no_trace(
    lifecycle: OrderLifecycleManager,
    repository: OrderRepository,
    outbox: Outbox,
    state_manager,
    seeded: Restaurant,
    make_request,
) -> None:
    """Samosa has one left; asking for two rejects the whole order."""
    with pytest.raises(OutOfStock) as exc_info:
        await lifecycle.create_order("rest_1", make_request(items=[("curry", 1), ("samosa", 2)]))

    assert isinstance(exc_info.value, ConflictError)
    assert await _stock(repository, "samosa") == 1
    assert await _stock(repository, "curry") == 20
    assert await state_manager.sorted_members(keys.restaurant_orders_key("rest_1")) == []
    assert await repository.get_customer("rest_1", "jane@example.com") is None
    assert await outbox.pending() == []


@pytest.mark.asyncio
async def test_create_order_with_promo(
    lifecycle: OrderLifecycleManager,
    repository: OrderRepository,
    seeded: Restaurant,
    make_request,
    make_promo,
) -> None:
    await repository.save_promo_code(make_promo(min_order_amount=Decimal("30")))

    order = await lifecycle.create_order("rest_1", make_request(promo_code="save10"))

    assert order.discount_amount == Decimal("10.00")
    assert order.total == Decimal("29.616")
    assert order.promo_code == "SAVE10"
    assert (await repository.get_promo_code("rest_1", "SAVE10")).current_uses == 1


@pytest.mark.asyncio
async def test_rejected_promo_rolls_back_everything(
    lifecycle: OrderLifecycleManager,
    repository: OrderRepository,
    seeded: Restaurant,
    make_request,
    make_promo,
) -> None:
    await repository.save_promo_code(make_promo(max_uses=1, current_uses=1))

    with pytest.raises(ConflictError):
        await lifecycle.create_order("rest_1", make_request(promo_code="SAVE10"))

    assert await _stock(repository, "curry") == 20
    assert (await repository.get_promo_code("rest_1", "SAVE10")).current_uses == 1


@pytest.mark.asyncio
async def test_per_customer_promo_limit(
    lifecycle: OrderLifecycleManager,
    repository: OrderRepository,
    seeded: Restaurant,
    make_request,
    make_promo,
) -> None:
    await repository.save_promo_code(make_promo(max_uses_per_customer=1))
    await lifecycle.create_order("rest_1", make_request(promo_code="SAVE10"))

    with pytest.raises(ConflictError):
        await lifecycle.create_order("rest_1", make_request(promo_code="SAVE10"))

    other = await lifecycle.create_order(
        "rest_1", make_request(email="sam@example.com", promo_code="SAVE10")
    )
    assert other.discount_amount == Decimal("10.00")


@pytest.mark.asyncio
async def test_customer_upserted_per_order(
    lifecycle: OrderLifecycleManager,
    repository: OrderRepository,
    seeded: Restaurant,
    make_request,
) -> None:
    first = await lifecycle.create_order("rest_1", make_request())
    second = await lifecycle.create_order("rest_1", make_request(email="JANE@example.com"))

    customer = await repository.get_customer("rest_1", "jane@example.com")
    assert customer.total_orders == 2
    assert first.customer_id == second.customer_id == customer.id


@pytest.mark.asyncio
async def test_low_stock_event_emitted(
    lifecycle: OrderLifecycleManager, outbox: Outbox, seeded: Restaurant, make_request
) -> None:
    await lifecycle.create_order("rest_1", make_request(items=[("curry", 15)]))

    events = await outbox.pending()
    low_stock = [e for e in events if e.event_type == OrderEventType.LOW_STOCK]
    assert len(low_stock) == 1
    assert low_stock[0].payload["stock_count"] == 5


@pytest.mark.asyncio
async def test_pickup_order_needs_no_address(
    lifecycle: OrderLifecycleManager, seeded: Restaurant, make_request
) -> None:
    order = await lifecycle.create_order("rest_1", make_request(order_type=OrderType.PICKUP))

    assert order.delivery_fee == Decimal("0")
    assert order.delivery_address is None


@pytest.mark.asyncio
async def test_create_order_validation(
    lifecycle: OrderLifecycleManager, seeded: Restaurant, make_request
) -> None:
    with pytest.raises(ValidationError):
        await lifecycle.create_order("rest_1", make_request(items=[]))

    with pytest.raises(ValidationError):
        await lifecycle.create_order("rest_1", make_request(delivery_address=None))

    with pytest.raises(ValidationError):
        await lifecycle.create_order("rest_1", make_request(items=[("curry", 0)]))

    with pytest.raises(ValidationError):
        await lifecycle.create_order(
            "rest_1",
            {
                "order_type": "pickup",
                "items": [{"menu_item_id": "curry", "quantity": 1}],
                "customer_info": {"name": "Jane", "email": "not-an-email", "phone": "07700900123"},
            },
        )


@pytest.mark.asyncio
async def test_contact_details_checked_after_trimming(
    lifecycle: OrderLifecycleManager, seeded: Restaurant, make_request
) -> None:
    def with_contact(name: str, phone: str) -> dict:
        payload = make_request().model_dump(mode="json")
        payload["customer_info"].update(name=name, phone=phone)
        return payload

    with pytest.raises(ValidationError):
        await lifecycle.create_order("rest_1", with_contact("Jane Doe", "         1"))
    with pytest.raises(ValidationError):
        await lifecycle.create_order("rest_1", with_contact("   ", "07700900123"))

    order = await lifecycle.create_order("rest_1", with_contact(" Jane Doe ", " 07700900123 "))
    assert order.customer_info.name == "Jane Doe"
    assert order.customer_info.phone == "07700900123"


@pytest.mark.asyncio
async def test_create_order_lookups(
    lifecycle: OrderLifecycleManager,
    repository: OrderRepository,
    seeded: Restaurant,
    make_request,
) -> None:
    with pytest.raises(NotFoundError):
        await lifecycle.create_order("missing", make_request())

    with pytest.raises(NotFoundError):
        await lifecycle.create_order("rest_1", make_request(items=[("ghost", 1)]))

    with pytest.raises(MenuItemUnavailable):
        await lifecycle.create_order("rest_1", make_request(items=[("special", 1)]))

    await repository.save_menu_item(
        MenuItem(id="foreign", restaurant_id="rest_2", name="Foreign", price=Decimal("1.00"))
    )
    with pytest.raises(NotFoundError):
        await lifecycle.create_order("rest_1", make_request(items=[("foreign", 1)]))


@pytest.mark.asyncio
async def test_restaurant_must_accept_orders(
    lifecycle: OrderLifecycleManager,
    repository: OrderRepository,
    seeded: Restaurant,
    make_request,
) -> None:
    await repository.save_restaurant(seeded.model_copy(update={"accepting_orders": False}))

    with pytest.raises(ConflictError):
        await lifecycle.create_order("rest_1", make_request())


@pytest.mark.asyncio
async def test_minimum_order_amount(
    lifecycle: OrderLifecycleManager,
    repository: OrderRepository,
    seeded: Restaurant,
    make_request,
) -> None:
    seeded.settings.ordering.minimum_order_amount = Decimal("40.00")
    await repository.save_restaurant(seeded)

    with pytest.raises(ValidationError):
        await lifecycle.create_order("rest_1", make_request())
    with pytest.raises(ValidationError) as exc_info:
        await lifecycle.preview_pricing("rest_1", make_request())

    assert exc_info.value.details["minimum_order_amount"] == "40.00"
    assert exc_info.value.details["subtotal"] == "30.93"


@pytest.mark.asyncio
async def test_preview_pricing_reserves_nothing(
    lifecycle: OrderLifecycleManager,
    repository: OrderRepository,
    seeded: Restaurant,
    make_request,
    make_promo,
) -> None:
    await repository.save_promo_code(make_promo())

    quote = await lifecycle.preview_pricing("rest_1", make_request(promo_code="SAVE10"))

    assert quote.total == Decimal("29.616")
    assert quote.discount_amount == Decimal("10.00")
    assert await _stock(repository, "curry") == 20
    assert (await repository.get_promo_code("rest_1", "SAVE10")).current_uses == 0


# Status machine


@pytest.mark.asyncio
async def test_delivery_order_full_lifecycle(
    lifecycle: OrderLifecycleManager, seeded: Restaurant, make_request
) -> None:
    order = await lifecycle.create_order("rest_1", make_request())

    for status in (
        OrderStatus.CONFIRMED,
        OrderStatus.PREPARING,
        OrderStatus.READY,
        OrderStatus.OUT_FOR_DELIVERY,
        OrderStatus.DELIVERED,
    ):
        order = await lifecycle.update_status(order.id, status)
        assert order.completed_at is None

    order = await lifecycle.update_status(order.id, OrderStatus.COMPLETED)

    assert order.status == OrderStatus.COMPLETED
    assert order.completed_at is not None
    assert len(order.status_history) == 7


@pytest.mark.asyncio
async def test_backward_transition_rejected(
    lifecycle: OrderLifecycleManager, seeded: Restaurant, make_request
) -> None:
    order = await lifecycle.create_order("rest_1", make_request())
    for status in ("confirmed", "preparing", "ready"):
        order = await lifecycle.update_status(order.id, status)

    with pytest.raises(InvalidTransition) as exc_info:
        await lifecycle.update_status(order.id, OrderStatus.CONFIRMED)

    assert exc_info.value.details == {"from_status": "ready", "to_status": "confirmed"}
    assert (await lifecycle.get_order(order.id)).status == OrderStatus.READY


@pytest.mark.asyncio
async def test_pickup_handed_over_from_ready(
    lifecycle: OrderLifecycleManager, seeded: Restaurant, make_request
) -> None:
    order = await lifecycle.create_order("rest_1", make_request(order_type=OrderType.PICKUP))
    for status in ("confirmed", "preparing", "ready"):
        order = await lifecycle.update_status(order.id, status)

    with pytest.raises(InvalidTransition):
        await lifecycle.update_status(order.id, OrderStatus.OUT_FOR_DELIVERY)

    order = await lifecycle.update_status(order.id, OrderStatus.DELIVERED)
    assert order.status == OrderStatus.DELIVERED


@pytest.mark.asyncio
async def test_status_update_guards(
    lifecycle: OrderLifecycleManager, seeded: Restaurant, make_request
) -> None:
    order = await lifecycle.create_order("rest_1", make_request())

    with pytest.raises(ValidationError):
        await lifecycle.update_status(order.id, OrderStatus.REFUNDED)

    with pytest.raises(ValidationError):
        await lifecycle.update_status(order.id, "eaten")

    with pytest.raises(NotFoundError):
        await lifecycle.update_status(order.id, OrderStatus.CONFIRMED, restaurant_id="rest_2")


@pytest.mark.asyncio
async def test_confirmation_requests_ticket(
    lifecycle: OrderLifecycleManager, outbox: Outbox, seeded: Restaurant, make_request
) -> None:
    order = await lifecycle.create_order("rest_1", make_request())
    await lifecycle.update_status(order.id, OrderStatus.CONFIRMED)
    await lifecycle.update_status(order.id, OrderStatus.PREPARING)

    changes = [
        e for e in await outbox.pending() if e.event_type == OrderEventType.ORDER_STATUS_CHANGED
    ]
    assert [e.details["print_ticket"] for e in changes] == [True, False]


# Cancellation


@pytest.mark.asyncio
async def test_cancel_restocks_exactly_once(
    lifecycle: OrderLifecycleManager,
    repository: OrderRepository,
    seeded: Restaurant,
    make_request,
) -> None:
    order = await lifecycle.create_order("rest_1", make_request())
    assert await _stock(repository, "curry") == 18

    cancelled = await lifecycle.cancel_order(order.id, reason="customer request")
    assert cancelled.status == OrderStatus.CANCELLED
    assert cancelled.stock_reserved is False
    assert await _stock(repository, "curry") == 20

    with pytest.raises(InvalidTransition):
        await lifecycle.cancel_order(order.id)
    assert await _stock(repository, "curry") == 20


@pytest.mark.asyncio
async def test_update_status_cancelled_delegates(
    lifecycle: OrderLifecycleManager,
    repository: OrderRepository,
    outbox: Outbox,
    seeded: Restaurant,
    make_request,
) -> None:
    order = await lifecycle.create_order("rest_1", make_request())

    order = await lifecycle.update_status(order.id, OrderStatus.CANCELLED)

    assert order.status == OrderStatus.CANCELLED
    assert await _stock(repository, "curry") == 20
    assert (await outbox.pending())[-1].event_type == OrderEventType.ORDER_CANCELLED


@pytest.mark.asyncio
async def test_completed_order_cannot_be_cancelled(
    lifecycle: OrderLifecycleManager, seeded: Restaurant, make_request
) -> None:
    order = await lifecycle.create_order("rest_1", make_request(order_type=OrderType.PICKUP))
    for status in ("confirmed", "preparing", "ready", "delivered", "completed"):
        order = await lifecycle.update_status(order.id, status)

    with pytest.raises(InvalidTransition):
        await lifecycle.cancel_order(order.id)


# Payments


@pytest.mark.asyncio
async def test_payment_success_confirms_once(
    lifecycle: OrderLifecycleManager, outbox: Outbox, seeded: Restaurant, make_request
) -> None:
    order = await lifecycle.create_order("rest_1", make_request())

    first = await lifecycle.mark_payment_succeeded(order.id, payment_reference="pi_123")
    second = await lifecycle.mark_payment_succeeded(order.id, payment_reference="pi_123")

    assert first.status == second.status == OrderStatus.CONFIRMED
    assert second.payment_status == PaymentStatus.COMPLETED
    assert second.payment_reference == "pi_123"
    payments = [
        e for e in await outbox.pending() if e.event_type == OrderEventType.PAYMENT_RECEIVED
    ]
    assert len(payments) == 1
    assert payments[0].details["print_ticket"] is True


@pytest.mark.asyncio
async def test_payment_failure(
    lifecycle: OrderLifecycleManager, seeded: Restaurant, make_request
) -> None:
    order = await lifecycle.create_order("rest_1", make_request())

    failed = await lifecycle.mark_payment_failed(order.id, reason="card declined")
    assert failed.payment_status == PaymentStatus.FAILED
    assert failed.status == OrderStatus.PENDING

    await lifecycle.mark_payment_succeeded(order.id)
    with pytest.raises(ConflictError):
        await lifecycle.mark_payment_failed(order.id)


# Refunds


@pytest.mark.asyncio
async def test_full_refund_before_preparation_restocks(
    lifecycle: OrderLifecycleManager,
    repository: OrderRepository,
    seeded: Restaurant,
    make_request,
) -> None:
    order = await _paid_order(lifecycle, make_request)

    refunded = await lifecycle.refund_order(order.id, order.total, reason="duplicate order")

    assert refunded.status == OrderStatus.REFUNDED
    assert refunded.payment_status == PaymentStatus.REFUNDED
    assert refunded.refunded_amount == order.total
    assert await _stock(repository, "curry") == 20


@pytest.mark.asyncio
async def test_full_refund_after_preparation_keeps_stock(
    lifecycle: OrderLifecycleManager,
    repository: OrderRepository,
    seeded: Restaurant,
    make_request,
) -> None:
    order = await _paid_order(lifecycle, make_request)
    await lifecycle.update_status(order.id, OrderStatus.PREPARING)

    refunded = await lifecycle.refund_order(order.id, "39.616", reason="late delivery")

    assert refunded.status == OrderStatus.REFUNDED
    assert await _stock(repository, "curry") == 18


@pytest.mark.asyncio
async def test_full_refund_restock_override(
    lifecycle: OrderLifecycleManager,
    repository: OrderRepository,
    seeded: Restaurant,
    make_request,
) -> None:
    order = await _paid_order(lifecycle, make_request)
    await lifecycle.update_status(order.id, OrderStatus.PREPARING)

    await lifecycle.refund_order(order.id, order.total, reason="kitchen closed", restock=True)

    assert await _stock(repository, "curry") == 20


@pytest.mark.asyncio
async def test_partial_refund_changes_payment_only(
    lifecycle: OrderLifecycleManager,
    repository: OrderRepository,
    outbox: Outbox,
    seeded: Restaurant,
    make_request,
) -> None:
    order = await _paid_order(lifecycle, make_request)

    partial = await lifecycle.refund_order(order.id, Decimal("10.00"), reason="missing naan")

    assert partial.status == OrderStatus.CONFIRMED
    assert partial.payment_status == PaymentStatus.PARTIAL_REFUND
    assert partial.refunded_amount == Decimal("10.00")
    assert partial.refundable_amount == Decimal("29.616")
    assert await _stock(repository, "curry") == 18

    event = (await outbox.pending())[-1]
    assert event.event_type == OrderEventType.ORDER_REFUNDED
    assert event.details["full_refund"] is False
    assert event.details["amount"] == "10.00"

    # The remainder completes the refund
    rest = await lifecycle.refund_order(order.id, partial.refundable_amount, reason="goodwill")
    assert rest.status == OrderStatus.REFUNDED
    assert rest.payment_status == PaymentStatus.REFUNDED


@pytest.mark.asyncio
@pytest.mark.parametrize("charged", ["39.62", "39.61"])
async def test_full_refund_of_charged_amount(
    lifecycle: OrderLifecycleManager,
    repository: OrderRepository,
    outbox: Outbox,
    seeded: Restaurant,
    make_request,
    charged: str,
) -> None:
    """The provider charged 39.616 rounded to the cent; refunding that settles the order."""
    order = await _paid_order(lifecycle, make_request)

    refunded = await lifecycle.refund_order(order.id, charged, reason="wrong address")

    assert refunded.status == OrderStatus.REFUNDED
    assert refunded.payment_status == PaymentStatus.REFUNDED
    assert refunded.refunded_amount == Decimal("39.616")
    assert refunded.refundable_amount == Decimal("0")
    assert await _stock(repository, "curry") == 20

    event = (await outbox.pending())[-1]
    assert event.details["full_refund"] is True
    assert event.details["amount"] == charged


@pytest.mark.asyncio
async def test_refund_beyond_rounded_balance_rejected(
    lifecycle: OrderLifecycleManager, seeded: Restaurant, make_request
) -> None:
    order = await _paid_order(lifecycle, make_request)

    with pytest.raises(ValidationError) as exc_info:
        await lifecycle.refund_order(order.id, "39.63", reason="too much")
    assert exc_info.value.details["refundable"] == "39.62"

    partial = await lifecycle.refund_order(order.id, "39.60", reason="most of it")
    assert partial.payment_status == PaymentStatus.PARTIAL_REFUND
    assert partial.status == OrderStatus.CONFIRMED


@pytest.mark.asyncio
async def test_refund_guards(
    lifecycle: OrderLifecycleManager, seeded: Restaurant, make_request
) -> None:
    unpaid = await lifecycle.create_order("rest_1", make_request())
    with pytest.raises(ConflictError):
        await lifecycle.refund_order(unpaid.id, Decimal("1.00"), reason="test")

    order = await _paid_order(lifecycle, make_request)
    with pytest.raises(ValidationError):
        await lifecycle.refund_order(order.id, Decimal("100.00"), reason="too much")
    with pytest.raises(ValidationError):
        await lifecycle.refund_order(order.id, Decimal("0"), reason="nothing")
    with pytest.raises(ValidationError):
        await lifecycle.refund_order(order.id, Decimal("1.00"), reason=" ")

    await lifecycle.refund_order(order.id, order.total, reason="all of it")
    with pytest.raises(InvalidTransition):
        await lifecycle.refund_order(order.id, Decimal("1.00"), reason="again")


# Queries and notes


@pytest.mark.asyncio
async def test_update_notes(
    lifecycle: OrderLifecycleManager, outbox: Outbox, seeded: Restaurant, make_request
) -> None:
    order = await lifecycle.create_order("rest_1", make_request())

    updated = await lifecycle.update_notes(order.id, "Ring the bell twice")

    assert updated.notes == "Ring the bell twice"
    assert (await outbox.pending())[-1].event_type == OrderEventType.ORDER_UPDATED


@pytest.mark.asyncio
async def test_get_order_scoped_to_restaurant(
    lifecycle: OrderLifecycleManager, seeded: Restaurant, make_request
) -> None:
    order = await lifecycle.create_order("rest_1", make_request())

    assert (await lifecycle.get_order(order.id, restaurant_id="rest_1")).id == order.id
    with pytest.raises(NotFoundError):
        await lifecycle.get_order(order.id, restaurant_id="rest_2")


@pytest.mark.asyncio
async def test_list_orders_filters_and_pages(
    lifecycle: OrderLifecycleManager, seeded: Restaurant, make_request
) -> None:
    first = await lifecycle.create_order("rest_1", make_request())
    second = await lifecycle.create_order(
        "rest_1", make_request(order_type=OrderType.PICKUP, email="sam@example.com")
    )
    third = await lifecycle.create_order("rest_1", make_request(email="kim@example.com"))
    await lifecycle.update_status(second.id, OrderStatus.CONFIRMED)

    page = await lifecycle.list_orders("rest_1", page=1, page_size=2)
    assert page.total == 3
    assert page.pages == 2
    assert [o.id for o in page.orders] == [third.id, second.id]

    confirmed = await lifecycle.list_orders(
        "rest_1", OrderFilters(status=[OrderStatus.CONFIRMED])
    )
    assert [o.id for o in confirmed.orders] == [second.id]

    deliveries = await lifecycle.list_orders(
        "rest_1", OrderFilters(order_type=[OrderType.DELIVERY])
    )
    assert {o.id for o in deliveries.orders} == {first.id, third.id}

    by_number = await lifecycle.list_orders("rest_1", OrderFilters(search=first.order_number))
    assert [o.id for o in by_number.orders] == [first.id]

"""Outbox event handlers for the notification, printing and audit collaborators."""

from order_engine.engine.outbox import EventHandler
from order_engine.models.events import OrderEvent, OrderEventType
from order_engine.models.order import Order
from order_engine.notifications.audit import AuditLog
from order_engine.notifications.dispatcher import NotificationDispatcher
from order_engine.notifications.printing import KitchenTicketPrinter
from order_engine.state.repository import OrderRepository

# Events after which the customer sees a new order status
STATUS_EVENTS = frozenset(
    {
        OrderEventType.ORDER_STATUS_CHANGED,
        OrderEventType.ORDER_CANCELLED,
        OrderEventType.ORDER_REFUNDED,
        OrderEventType.PAYMENT_RECEIVED,
    }
)


def build_handlers(
    repository: OrderRepository,
    dispatcher: NotificationDispatcher,
    printer: KitchenTicketPrinter,
    audit_log: AuditLog,
) -> dict[str, EventHandler]:
    """Wire the collaborators into named handlers for the outbox worker."""

    async def notifications(event: OrderEvent) -> None:
        if event.event_type == OrderEventType.LOW_STOCK:
            await dispatcher.notify_low_stock(event.restaurant_id, event.payload)
            return

        order = Order.model_validate(event.payload)
        if event.event_type == OrderEventType.ORDER_CREATED:
            await dispatcher.notify_order_created(order)
        elif event.event_type in STATUS_EVENTS and _status_changed(event):
            await dispatcher.notify_status_changed(order)

    async def kitchen_printing(event: OrderEvent) -> None:
        if not event.details.get("print_ticket"):
            return

        order = Order.model_validate(event.payload)
        restaurant = await repository.get_restaurant(order.restaurant_id)
        if restaurant is None:
            await printer.print_ticket(order)
            return
        await printer.print_ticket(
            order,
            restaurant_name=restaurant.name,
            kitchen_email=restaurant.settings.ordering.kitchen_email,
        )

    async def audit(event: OrderEvent) -> None:
        await audit_log.log(
            event.event_type.value,
            event.entity_type,
            event.entity_id,
            {"event_id": str(event.event_id), **event.details},
        )

    return {
        "notifications": notifications,
        "kitchen_printing": kitchen_printing,
        "audit": audit,
    }


def _status_changed(event: OrderEvent) -> bool:
    if event.event_type == OrderEventType.PAYMENT_RECEIVED:
        return bool(event.details.get("status_changed"))
    if event.event_type == OrderEventType.ORDER_REFUNDED:
        return bool(event.details.get("full_refund"))
    return True

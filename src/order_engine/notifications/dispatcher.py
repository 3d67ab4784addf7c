"""Customer and staff notifications."""

from typing import Any, Protocol

from order_engine.models.order import Order
from order_engine.notifications.email import EmailSender
from order_engine.utils.logging import ComponentLogger

STATUS_MESSAGES = {
    "confirmed": "Your order has been confirmed.",
    "preparing": "The kitchen is preparing your order.",
    "ready": "Your order is ready.",
    "out_for_delivery": "Your order is on its way.",
    "delivered": "Your order has been delivered.",
    "completed": "Thank you for your order!",
    "cancelled": "Your order has been cancelled.",
    "refunded": "Your order has been refunded.",
}


class NotificationDispatcher(Protocol):
    """Receives order facts after they are committed."""

    async def notify_order_created(self, order: Order) -> None:
        ...

    async def notify_status_changed(self, order: Order) -> None:
        ...

    async def notify_low_stock(self, restaurant_id: str, item: dict[str, Any]) -> None:
        ...


class EmailNotificationDispatcher:
    """Notifies customers by email and staff through the log."""

    def __init__(self, email_sender: EmailSender):
        self.email_sender = email_sender
        self.logger = ComponentLogger("notifications")

    async def notify_order_created(self, order: Order) -> None:
        await self.email_sender.send(
            to=order.customer_info.email,
            subject=f"Order {order.order_number} received",
            text=(
                f"Hi {order.customer_info.name},\n\n"
                f"We have received your order {order.order_number} "
                f"totalling £{order.total:.2f}."
            ),
        )
        self.logger.log_operation("customer_notified", order_id=str(order.id), kind="created")

    async def notify_status_changed(self, order: Order) -> None:
        message = STATUS_MESSAGES.get(order.status.value)
        if message is None:
            return
        await self.email_sender.send(
            to=order.customer_info.email,
            subject=f"Order {order.order_number}: {order.status.value.replace('_', ' ')}",
            text=f"Hi {order.customer_info.name},\n\n{message}",
        )
        self.logger.log_operation(
            "customer_notified",
            order_id=str(order.id),
            kind="status_changed",
            status=order.status.value,
        )

    async def notify_low_stock(self, restaurant_id: str, item: dict[str, Any]) -> None:
        self.logger.logger.warning(
            "low_stock_alert",
            restaurant_id=restaurant_id,
            menu_item_id=item.get("menu_item_id"),
            name=item.get("name"),
            stock_count=item.get("stock_count"),
            threshold=item.get("low_stock_threshold"),
        )

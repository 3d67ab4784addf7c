"""Kitchen ticket printing with email fallback."""

import html
from datetime import datetime
from typing import Protocol

from order_engine.models.order import Order, OrderType
from order_engine.notifications.email import EmailSender
from order_engine.utils.clock import utc_now
from order_engine.utils.logging import ComponentLogger

TICKET_WIDTH = 32
RULE = "=" * TICKET_WIDTH
DIVIDER = "-" * TICKET_WIDTH


class PrintTransport(Protocol):
    """Sends a formatted ticket to a physical printer."""

    async def submit(self, title: str, content: str) -> None:
        ...


def format_ticket(
    order: Order,
    restaurant_name: str = "KITCHEN",
    printed_at: datetime | None = None,
) -> str:
    """Format an order as a fixed-width thermal printer ticket."""
    printed_at = printed_at or utc_now()
    lines = [
        RULE,
        restaurant_name.upper().center(TICKET_WIDTH),
        RULE,
        f"Order: {order.order_number}",
        f"Type: {order.order_type.value.upper()}",
        f"Time: {printed_at.strftime('%Y-%m-%d %H:%M')}",
        DIVIDER,
        f"Customer: {order.customer_info.name}",
        f"Phone: {order.customer_info.phone}",
    ]
    if order.order_type == OrderType.DELIVERY and order.delivery_address:
        lines.append(f"Address: {order.delivery_address.one_line()}")
        if order.delivery_address.instructions:
            lines.append(f"   {order.delivery_address.instructions}")

    lines += [DIVIDER, "ITEMS:", DIVIDER]
    for item in order.items:
        lines.append(f"{item.quantity}x {item.name}")
        if item.customizations:
            mods = ", ".join(f"{c.option}: {c.value}" for c in item.customizations)
            lines.append(f"   Mods: {mods}")
        if item.notes:
            lines.append(f"   Notes: {item.notes}")
        lines.append(f"   £{item.line_total:.2f}")
        lines.append("")

    lines += [DIVIDER, f"TOTAL: £{order.total:.2f}", RULE]

    if order.notes:
        lines += ["SPECIAL INSTRUCTIONS:", order.notes, RULE]

    # Paper feed
    return "\n".join(lines) + "\n\n\n\n"


class KitchenTicketPrinter:
    """
    Prints kitchen tickets.

    When no transport is configured, or the transport fails, the ticket is
    emailed to the kitchen instead. Only a failure of both channels is
    raised, so the outbox worker can retry it.
    """

    def __init__(
        self,
        email_sender: EmailSender,
        kitchen_email: str,
        transport: PrintTransport | None = None,
    ):
        self.email_sender = email_sender
        self.kitchen_email = kitchen_email
        self.transport = transport
        self.logger = ComponentLogger("kitchen_printing")

    async def print_ticket(
        self,
        order: Order,
        restaurant_name: str = "KITCHEN",
        kitchen_email: str | None = None,
    ) -> str:
        """
        Deliver a ticket for ``order``.

        Returns:
            "printer" or "email", the channel that accepted the ticket
        """
        ticket = format_ticket(order, restaurant_name)

        if self.transport is not None:
            try:
                await self.transport.submit(f"Order {order.order_number}", ticket)
                self.logger.log_operation(
                    "ticket_printed", order_id=str(order.id), order_number=order.order_number
                )
                return "printer"
            except Exception as e:
                self.logger.log_error(
                    "print_failed",
                    order_id=str(order.id),
                    order_number=order.order_number,
                    error_detail=str(e),
                )

        await self.email_sender.send(
            to=kitchen_email or self.kitchen_email,
            subject=f"Kitchen Order {order.order_number}",
            text=ticket,
            html=(
                '<pre style="font-family: monospace; white-space: pre-wrap;">'
                f"{html.escape(ticket)}</pre>"
            ),
        )
        self.logger.log_operation(
            "ticket_emailed", order_id=str(order.id), order_number=order.order_number
        )
        return "email"

"""Side-effect collaborators driven by the outbox worker."""

from order_engine.notifications.audit import AuditLog
from order_engine.notifications.dispatcher import EmailNotificationDispatcher, NotificationDispatcher
from order_engine.notifications.email import EmailSender, LoggingEmailSender
from order_engine.notifications.handlers import build_handlers
from order_engine.notifications.printing import KitchenTicketPrinter, PrintTransport, format_ticket

__all__ = [
    "AuditLog",
    "EmailNotificationDispatcher",
    "NotificationDispatcher",
    "EmailSender",
    "LoggingEmailSender",
    "build_handlers",
    "KitchenTicketPrinter",
    "PrintTransport",
    "format_ticket",
]

"""Outbox worker entry point: ``python -m order_engine.main``."""

import asyncio
import signal

from order_engine.config import get_settings
from order_engine.engine.outbox import OutboxWorker
from order_engine.notifications import (
    AuditLog,
    EmailNotificationDispatcher,
    KitchenTicketPrinter,
    LoggingEmailSender,
    build_handlers,
)
from order_engine.state.manager import get_state_manager
from order_engine.state.repository import OrderRepository
from order_engine.utils.logging import get_logger, setup_logging

# Setup logging first
setup_logging()
logger = get_logger(__name__)


async def run_worker() -> None:
    """Drain the outbox until SIGINT or SIGTERM."""
    settings = get_settings()
    logger.info("worker_starting", environment=settings.environment)

    state_manager = await get_state_manager()
    email_sender = LoggingEmailSender()
    handlers = build_handlers(
        repository=OrderRepository(state_manager),
        dispatcher=EmailNotificationDispatcher(email_sender),
        printer=KitchenTicketPrinter(email_sender, settings.kitchen_email),
        audit_log=AuditLog(state_manager),
    )
    worker = OutboxWorker(state_manager, handlers)

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop.set)

    try:
        await worker.run(stop)
    finally:
        logger.info("worker_shutting_down")
        await state_manager.disconnect()


def main() -> None:
    asyncio.run(run_worker())


if __name__ == "__main__":
    main()

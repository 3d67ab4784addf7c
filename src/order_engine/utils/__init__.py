"""Utility modules."""

from order_engine.utils.clock import utc_now
from order_engine.utils.logging import ComponentLogger, get_logger, setup_logging
from order_engine.utils.tracing import OrderTracer

__all__ = ["setup_logging", "get_logger", "ComponentLogger", "OrderTracer", "utc_now"]

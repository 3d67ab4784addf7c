"""Order processing engine components."""

from order_engine.engine.lifecycle import OrderLifecycleManager, OrderQuote
from order_engine.engine.outbox import Outbox, OutboxWorker
from order_engine.engine.pricing import PricingBreakdown, PricingCalculator
from order_engine.engine.promotions import PromoCodeValidator
from order_engine.engine.stock import StockLedger, StockMovement

__all__ = [
    "OrderLifecycleManager",
    "OrderQuote",
    "Outbox",
    "OutboxWorker",
    "PricingBreakdown",
    "PricingCalculator",
    "PromoCodeValidator",
    "StockLedger",
    "StockMovement",
]

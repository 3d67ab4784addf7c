"""Domain events written to the outbox alongside state changes."""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from order_engine.utils.clock import utc_now


class OrderEventType(str, Enum):
    ORDER_CREATED = "order_created"
    ORDER_STATUS_CHANGED = "order_status_changed"
    ORDER_UPDATED = "order_updated"
    ORDER_CANCELLED = "order_cancelled"
    ORDER_REFUNDED = "order_refunded"
    PAYMENT_RECEIVED = "payment_received"
    PAYMENT_FAILED = "payment_failed"
    LOW_STOCK = "low_stock"


class OrderEvent(BaseModel):
    """Fact recorded in the same transaction as the change it describes."""

    event_id: UUID = Field(default_factory=uuid4)
    event_version: int = 1
    event_type: OrderEventType
    entity_type: str = "Order"
    entity_id: str
    restaurant_id: str
    occurred_at: datetime = Field(default_factory=utc_now)
    # Order snapshot for order events; item and stock level for LOW_STOCK
    payload: dict[str, Any] = Field(default_factory=dict)
    details: dict[str, Any] = Field(default_factory=dict)

    model_config = {"extra": "ignore"}

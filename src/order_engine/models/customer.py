"""Customer-related models."""

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, EmailStr, Field

from order_engine.utils.clock import utc_now


class Customer(BaseModel):
    """Customer identity keyed by (email, restaurant)."""

    id: UUID = Field(default_factory=uuid4)
    restaurant_id: str
    email: EmailStr
    name: str
    phone: str | None = None
    total_orders: int = 0
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

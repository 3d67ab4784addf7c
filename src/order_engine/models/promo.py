"""Promo code models."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator

from order_engine.utils.clock import ensure_utc


class DiscountType(str, Enum):
    """How a promo code value is applied."""

    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed_amount"


class PromoCode(BaseModel):
    """Discount code, unique per restaurant."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    restaurant_id: str
    code: str = Field(min_length=1)
    name: str | None = None
    discount_type: DiscountType
    value: Decimal = Field(gt=0)
    min_order_amount: Decimal | None = Field(default=None, ge=0)
    max_discount_amount: Decimal | None = Field(default=None, ge=0)
    max_uses: int | None = Field(default=None, ge=0)
    max_uses_per_customer: int | None = Field(default=None, ge=0)
    # Authoritative usage lives in the usage counter; this is the hydrated value
    current_uses: int = Field(default=0, ge=0)
    valid_from: datetime
    valid_until: datetime
    is_active: bool = True

    @field_validator("code")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        """Codes are stored upper-case and matched case-insensitively."""
        return v.strip().upper()

    @field_validator("valid_from", "valid_until")
    @classmethod
    def normalize_window(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    def is_valid_at(self, moment: datetime) -> bool:
        """Check if the code is active within its validity window."""
        return self.is_active and self.valid_from <= moment <= self.valid_until


class PromoApplication(BaseModel):
    """Result of validating a promo code against an order amount."""

    promo_code_id: str
    code: str
    discount_amount: Decimal = Field(ge=0)

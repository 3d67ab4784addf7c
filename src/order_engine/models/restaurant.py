"""Restaurant configuration models."""

from decimal import Decimal

from pydantic import BaseModel, Field


class DeliverySettings(BaseModel):
    """Delivery pricing and timing for a restaurant."""

    enabled: bool = True
    fee: Decimal = Field(default=Decimal("0.00"), ge=0)
    # None means delivery is never free
    free_delivery_minimum: Decimal | None = Field(default=None, ge=0)
    estimated_minutes: int | None = Field(default=None, ge=0)


class OrderingSettings(BaseModel):
    """Order acceptance rules for a restaurant."""

    minimum_order_amount: Decimal = Field(default=Decimal("0.00"), ge=0)
    order_confirmation_required: bool = True
    kitchen_printing_enabled: bool = True
    pickup_estimated_minutes: int | None = Field(default=None, ge=0)
    kitchen_email: str | None = None


class TaxSettings(BaseModel):
    """Tax configuration; a missing rate falls back to the engine default."""

    rate: Decimal | None = Field(default=None, ge=0, le=1)


class RestaurantSettings(BaseModel):
    """Versioned restaurant settings."""

    version: int = 1
    delivery: DeliverySettings = Field(default_factory=DeliverySettings)
    ordering: OrderingSettings = Field(default_factory=OrderingSettings)
    tax: TaxSettings = Field(default_factory=TaxSettings)


class Restaurant(BaseModel):
    """Restaurant that owns menu items, promo codes and orders."""

    id: str
    name: str
    is_active: bool = True
    accepting_orders: bool = True
    settings: RestaurantSettings = Field(default_factory=RestaurantSettings)

"""Order-related data models."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, EmailStr, Field, field_validator

from order_engine.utils.clock import ensure_utc, utc_now


class OrderStatus(str, Enum):
    """Order status progression."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class PaymentStatus(str, Enum):
    """Payment progression, tracked separately from the order status."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    PARTIAL_REFUND = "partial_refund"
    REFUNDED = "refunded"


class OrderType(str, Enum):
    DELIVERY = "delivery"
    PICKUP = "pickup"


class LineCustomization(BaseModel):
    """One chosen option on a line item, e.g. ``spice_level: hot``."""

    option: str = Field(min_length=1)
    value: str


class CustomerInfo(BaseModel):
    """Contact snapshot captured when the order is placed."""

    name: str = Field(min_length=1)
    email: EmailStr
    phone: str = Field(min_length=10)

    @field_validator("name", "phone", mode="before")
    @classmethod
    def strip_whitespace(cls, v):
        # Stripped before the length constraints apply
        if isinstance(v, str):
            return v.strip()
        return v


class Address(BaseModel):
    """Delivery address."""

    street: str = Field(min_length=1)
    city: str = Field(min_length=1)
    postcode: str = Field(min_length=1)
    country: str = Field(min_length=1)
    instructions: str | None = None

    def one_line(self) -> str:
        return f"{self.street}, {self.city} {self.postcode}, {self.country}"


class OrderItemRequest(BaseModel):
    """Requested line in a creation request."""

    menu_item_id: str
    # Positivity is enforced by the pricing calculator
    quantity: int
    customizations: list[LineCustomization] = Field(default_factory=list)
    notes: str | None = None


class CreateOrderRequest(BaseModel):
    """Checkout payload submitted by the customer-facing flow."""

    order_type: OrderType
    items: list[OrderItemRequest] = Field(default_factory=list)
    customer_info: CustomerInfo
    delivery_address: Address | None = None
    notes: str | None = None
    promo_code: str | None = None


class OrderLineItem(BaseModel):
    """Individual item in an order with its price frozen at order time."""

    id: UUID = Field(default_factory=uuid4)
    menu_item_id: str
    name: str
    quantity: int = Field(ge=1)
    unit_price: Decimal = Field(ge=0)
    line_total: Decimal = Field(ge=0)
    customizations: list[LineCustomization] = Field(default_factory=list)
    notes: str | None = None


class StatusChange(BaseModel):
    """Accepted transition recorded on the order."""

    from_status: OrderStatus | None
    to_status: OrderStatus
    changed_at: datetime = Field(default_factory=utc_now)
    reason: str | None = None


class Order(BaseModel):
    """Complete order details."""

    id: UUID = Field(default_factory=uuid4)
    order_number: str
    restaurant_id: str
    customer_id: UUID | None = None
    status: OrderStatus = OrderStatus.PENDING
    order_type: OrderType

    # Items
    items: list[OrderLineItem] = Field(default_factory=list)

    # Pricing
    subtotal: Decimal = Field(default=Decimal("0.00"), ge=0)
    tax_amount: Decimal = Field(default=Decimal("0.00"), ge=0)
    delivery_fee: Decimal = Field(default=Decimal("0.00"), ge=0)
    discount_amount: Decimal = Field(default=Decimal("0.00"), ge=0)
    total: Decimal = Field(default=Decimal("0.00"), ge=0)

    # Customer snapshot
    customer_info: CustomerInfo
    delivery_address: Address | None = None

    # Promo
    promo_code_id: str | None = None
    promo_code: str | None = None

    # Payment
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_reference: str | None = None
    refunded_amount: Decimal = Field(default=Decimal("0.00"), ge=0)

    # Stock consumed by this order and not yet given back
    stock_reserved: bool = False

    notes: str | None = None
    status_history: list[StatusChange] = Field(default_factory=list)

    # Timing
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    estimated_ready_at: datetime | None = None
    completed_at: datetime | None = None

    @property
    def refundable_amount(self) -> Decimal:
        """Amount of the captured payment not yet refunded."""
        return self.total - self.refunded_amount

    def record_transition(
        self,
        to_status: OrderStatus,
        moment: datetime,
        reason: str | None = None,
    ) -> None:
        """Apply an already-validated status change."""
        self.status_history.append(
            StatusChange(
                from_status=self.status,
                to_status=to_status,
                changed_at=moment,
                reason=reason,
            )
        )
        self.status = to_status
        self.updated_at = moment
        if to_status == OrderStatus.COMPLETED:
            self.completed_at = moment


class OrderFilters(BaseModel):
    """Filters for listing a restaurant's orders."""

    status: list[OrderStatus] | None = None
    order_type: list[OrderType] | None = None
    customer_id: UUID | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None
    search: str | None = None

    @field_validator("date_from", "date_to")
    @classmethod
    def normalize_dates(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v)


class OrderPage(BaseModel):
    """One page of listed orders."""

    orders: list[Order]
    page: int
    page_size: int
    total: int
    pages: int

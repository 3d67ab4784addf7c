"""Data models for the order engine."""

from order_engine.models.customer import Customer
from order_engine.models.events import OrderEvent, OrderEventType
from order_engine.models.menu import MenuItem
from order_engine.models.order import (
    Address,
    CreateOrderRequest,
    CustomerInfo,
    LineCustomization,
    Order,
    OrderFilters,
    OrderItemRequest,
    OrderLineItem,
    OrderPage,
    OrderStatus,
    OrderType,
    PaymentStatus,
    StatusChange,
)
from order_engine.models.promo import DiscountType, PromoApplication, PromoCode
from order_engine.models.restaurant import (
    DeliverySettings,
    OrderingSettings,
    Restaurant,
    RestaurantSettings,
    TaxSettings,
)

__all__ = [
    # Customer
    "Customer",
    # Events
    "OrderEvent",
    "OrderEventType",
    # Menu
    "MenuItem",
    # Order
    "Address",
    "CreateOrderRequest",
    "CustomerInfo",
    "LineCustomization",
    "Order",
    "OrderFilters",
    "OrderItemRequest",
    "OrderLineItem",
    "OrderPage",
    "OrderStatus",
    "OrderType",
    "PaymentStatus",
    "StatusChange",
    # Promo
    "DiscountType",
    "PromoApplication",
    "PromoCode",
    # Restaurant
    "DeliverySettings",
    "OrderingSettings",
    "Restaurant",
    "RestaurantSettings",
    "TaxSettings",
]

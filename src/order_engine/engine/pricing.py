"""Pricing Calculator - turns priced lines into an order's monetary breakdown."""

from decimal import Decimal
from typing import Sequence

from pydantic import BaseModel, ConfigDict

from order_engine.exceptions import InvalidQuantity, MenuItemUnavailable
from order_engine.models.menu import MenuItem
from order_engine.models.order import OrderType
from order_engine.models.restaurant import DeliverySettings

ZERO = Decimal("0")
MINOR_UNIT = Decimal("0.01")


class PricingBreakdown(BaseModel):
    """Amounts computed for a set of lines, before any promo discount."""

    model_config = ConfigDict(frozen=True)

    subtotal: Decimal
    tax_amount: Decimal
    delivery_fee: Decimal
    pre_discount_total: Decimal


class PricingCalculator:
    """
    Pure pricing over (menu item, quantity) pairs.

    The calculator holds no state besides its fallback tax rate and performs
    no I/O, so identical inputs always produce identical breakdowns. Amounts
    are exact decimals; rounding for display or charging happens elsewhere.
    """

    def __init__(self, default_tax_rate: Decimal):
        self.default_tax_rate = default_tax_rate

    def calculate(
        self,
        lines: Sequence[tuple[MenuItem, int]],
        order_type: OrderType,
        delivery: DeliverySettings,
        tax_rate: Decimal | None = None,
    ) -> PricingBreakdown:
        """
        Price a cart.

        Args:
            lines: Menu items with requested quantities, using current prices
            order_type: Delivery or pickup
            delivery: Restaurant delivery fee configuration
            tax_rate: Restaurant tax rate; the default applies when None

        Returns:
            PricingBreakdown with subtotal, tax, delivery fee and total

        Raises:
            InvalidQuantity: A quantity is zero or negative
            MenuItemUnavailable: An item is not currently orderable
        """
        for item, quantity in lines:
            if quantity <= 0:
                raise InvalidQuantity(
                    f"Quantity for {item.name} must be positive",
                    menu_item_id=item.id,
                    quantity=quantity,
                )
            if not item.is_available:
                raise MenuItemUnavailable(
                    f"Item not available: {item.name}", menu_item_id=item.id
                )

        subtotal = sum((item.price * quantity for item, quantity in lines), ZERO)
        rate = self.default_tax_rate if tax_rate is None else tax_rate
        tax_amount = subtotal * rate
        delivery_fee = self.delivery_fee(subtotal, order_type, delivery)

        return PricingBreakdown(
            subtotal=subtotal,
            tax_amount=tax_amount,
            delivery_fee=delivery_fee,
            pre_discount_total=subtotal + tax_amount + delivery_fee,
        )

    @staticmethod
    def delivery_fee(
        subtotal: Decimal,
        order_type: OrderType,
        delivery: DeliverySettings,
    ) -> Decimal:
        """Flat fee for delivery orders below the free-delivery threshold."""
        if order_type != OrderType.DELIVERY:
            return ZERO
        threshold = delivery.free_delivery_minimum
        if threshold is not None and subtotal >= threshold:
            return ZERO
        return delivery.fee

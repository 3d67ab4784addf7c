"""Promo Code Validator - eligibility, usage caps and discount computation."""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from redis.asyncio.client import Pipeline

from order_engine.exceptions import (
    CodeExhausted,
    CustomerLimitReached,
    InvalidOrExpiredCode,
    MinimumNotMet,
)
from order_engine.models.promo import DiscountType, PromoApplication, PromoCode
from order_engine.state import keys
from order_engine.state.repository import OrderRepository
from order_engine.utils.clock import utc_now
from order_engine.utils.logging import get_logger

logger = get_logger(__name__)

HUNDRED = Decimal("100")


class PromoCodeValidator:
    """
    Validates promo codes against an order amount.

    Validation never changes usage counters. The caller increments them with
    ``stage_usage`` inside the same transaction that commits the order, after
    watching the counters through ``watch_and_validate``.
    """

    def __init__(self, repository: OrderRepository):
        self.repository = repository

    @staticmethod
    def evaluate(
        promo: PromoCode | None,
        order_amount: Decimal,
        now: datetime,
        customer_uses: int = 0,
    ) -> PromoApplication:
        """
        Apply the eligibility rules and compute the discount.

        Args:
            promo: Code loaded for the restaurant, or None if there is none
            order_amount: Order subtotal after pricing
            now: Moment the validity window is checked against
            customer_uses: Times the ordering customer already used the code

        Returns:
            PromoApplication with the final discount amount
        """
        if promo is None or not promo.is_valid_at(now):
            raise InvalidOrExpiredCode("Invalid or expired promo code")

        if promo.max_uses is not None and promo.current_uses >= promo.max_uses:
            raise CodeExhausted(
                "Promo code usage limit reached",
                code=promo.code,
                max_uses=promo.max_uses,
            )

        if (
            promo.max_uses_per_customer is not None
            and customer_uses >= promo.max_uses_per_customer
        ):
            raise CustomerLimitReached(
                "Promo code already used the maximum number of times by this customer",
                code=promo.code,
            )

        if promo.min_order_amount is not None and order_amount < promo.min_order_amount:
            raise MinimumNotMet(
                f"Minimum order amount of {promo.min_order_amount} required",
                code=promo.code,
                min_order_amount=str(promo.min_order_amount),
            )

        if promo.discount_type == DiscountType.PERCENTAGE:
            discount = order_amount * promo.value / HUNDRED
        else:
            discount = promo.value

        # Never discount more than the order amount
        discount = min(discount, order_amount)

        if promo.max_discount_amount is not None:
            discount = min(discount, promo.max_discount_amount)

        return PromoApplication(
            promo_code_id=promo.id,
            code=promo.code,
            discount_amount=discount,
        )

    async def validate(
        self,
        code: str,
        restaurant_id: str,
        order_amount: Decimal,
        customer_id: UUID | None = None,
        now: datetime | None = None,
    ) -> PromoApplication:
        """Validate a code outside any transaction, e.g. for a checkout preview."""
        reader = await self.repository.state.client()
        return await self._load_and_evaluate(
            reader, code, restaurant_id, order_amount, customer_id, now
        )

    async def watch_and_validate(
        self,
        pipe: Pipeline,
        code: str,
        restaurant_id: str,
        order_amount: Decimal,
        customer_id: UUID | None = None,
        now: datetime | None = None,
    ) -> PromoApplication:
        """Watch the code's counters on ``pipe``, then validate against them."""
        watch = [keys.promo_key(restaurant_id, code), keys.promo_uses_key(restaurant_id, code)]
        if customer_id is not None:
            watch.append(keys.promo_customer_uses_key(restaurant_id, code, customer_id))
        await pipe.watch(*watch)

        return await self._load_and_evaluate(
            pipe, code, restaurant_id, order_amount, customer_id, now
        )

    def stage_usage(
        self,
        pipe: Pipeline,
        restaurant_id: str,
        application: PromoApplication,
        customer_id: UUID | None = None,
    ) -> None:
        """Queue the usage increments on a pipeline in MULTI mode."""
        pipe.incr(keys.promo_uses_key(restaurant_id, application.code))
        if customer_id is not None:
            pipe.incr(keys.promo_customer_uses_key(restaurant_id, application.code, customer_id))

    async def _load_and_evaluate(
        self,
        reader: Any,
        code: str,
        restaurant_id: str,
        order_amount: Decimal,
        customer_id: UUID | None,
        now: datetime | None,
    ) -> PromoApplication:
        promo = await self.repository.load_promo_code(reader, restaurant_id, code)

        customer_uses = 0
        if promo is not None and customer_id is not None:
            raw = await reader.get(keys.promo_customer_uses_key(restaurant_id, code, customer_id))
            customer_uses = int(raw) if raw else 0

        application = self.evaluate(
            promo,
            order_amount,
            now or utc_now(),
            customer_uses=customer_uses,
        )

        logger.debug(
            "promo_code_validated",
            restaurant_id=restaurant_id,
            code=application.code,
            discount_amount=str(application.discount_amount),
        )
        return application

"""Persistence of catalog data, customers and orders."""

import math
from datetime import datetime
from typing import Any
from uuid import UUID

from redis.asyncio.client import Pipeline

from order_engine.config import get_settings
from order_engine.exceptions import ValidationError
from order_engine.models.customer import Customer
from order_engine.models.menu import MenuItem
from order_engine.models.order import Order, OrderFilters, OrderPage
from order_engine.models.promo import PromoCode
from order_engine.models.restaurant import Restaurant
from order_engine.state import keys
from order_engine.state.manager import StateManager
from order_engine.utils.logging import get_logger

logger = get_logger(__name__)


def _parse_int(raw: str | None) -> int | None:
    return int(raw) if raw is not None else None


class OrderRepository:
    """
    Reads and writes engine records.

    ``load_*`` methods accept a reader, which is either the Redis client or a
    pipeline that is watching keys; ``stage_*`` methods queue writes on a
    pipeline that is already in ``MULTI`` mode.
    """

    def __init__(self, state_manager: StateManager):
        self.state = state_manager
        self.settings = get_settings()

    # Restaurants

    async def save_restaurant(self, restaurant: Restaurant) -> None:
        await self.state.set(keys.restaurant_key(restaurant.id), restaurant.model_dump_json())
        logger.info("restaurant_saved", restaurant_id=restaurant.id)

    async def get_restaurant(self, restaurant_id: str) -> Restaurant | None:
        data = await self.state.get(keys.restaurant_key(restaurant_id))
        return Restaurant.model_validate(data) if data else None

    # Menu items

    async def save_menu_item(self, item: MenuItem) -> None:
        """Save a menu item; its stock counter is set or cleared to match."""
        async with self.state.pipeline() as pipe:
            pipe.multi()
            pipe.set(
                keys.menu_item_key(item.id),
                item.model_dump_json(exclude={"stock_count"}),
            )
            if item.tracks_stock:
                pipe.set(keys.stock_key(item.id), item.stock_count)
            else:
                pipe.delete(keys.stock_key(item.id))
            await pipe.execute()

        logger.info(
            "menu_item_saved",
            menu_item_id=item.id,
            restaurant_id=item.restaurant_id,
            stock_count=item.stock_count,
        )

    async def get_menu_item(self, menu_item_id: str) -> MenuItem | None:
        items = await self.load_menu_items(await self.state.client(), [menu_item_id])
        return items[menu_item_id]

    async def load_menu_items(
        self,
        reader: Any,
        menu_item_ids: list[str],
    ) -> dict[str, MenuItem | None]:
        """Load menu items with their current stock counters."""
        if not menu_item_ids:
            return {}

        raw_items = await reader.mget([keys.menu_item_key(i) for i in menu_item_ids])
        raw_stock = await reader.mget([keys.stock_key(i) for i in menu_item_ids])

        result: dict[str, MenuItem | None] = {}
        for item_id, raw, stock in zip(menu_item_ids, raw_items, raw_stock):
            if raw is None:
                result[item_id] = None
                continue
            item = MenuItem.model_validate_json(raw)
            item.stock_count = _parse_int(stock)
            result[item_id] = item
        return result

    # Promo codes

    async def save_promo_code(self, promo: PromoCode) -> None:
        """Save a promo code and reset its usage counter to ``current_uses``."""
        async with self.state.pipeline() as pipe:
            pipe.multi()
            pipe.set(
                keys.promo_key(promo.restaurant_id, promo.code),
                promo.model_dump_json(exclude={"current_uses"}),
            )
            pipe.set(keys.promo_uses_key(promo.restaurant_id, promo.code), promo.current_uses)
            await pipe.execute()

        logger.info("promo_code_saved", restaurant_id=promo.restaurant_id, code=promo.code)

    async def get_promo_code(self, restaurant_id: str, code: str) -> PromoCode | None:
        return await self.load_promo_code(await self.state.client(), restaurant_id, code)

    async def load_promo_code(
        self,
        reader: Any,
        restaurant_id: str,
        code: str,
    ) -> PromoCode | None:
        raw, uses = await reader.mget(
            [keys.promo_key(restaurant_id, code), keys.promo_uses_key(restaurant_id, code)]
        )
        if raw is None:
            return None
        promo = PromoCode.model_validate_json(raw)
        promo.current_uses = _parse_int(uses) or 0
        return promo

    # Customers

    async def get_customer(self, restaurant_id: str, email: str) -> Customer | None:
        return await self.load_customer(await self.state.client(), restaurant_id, email)

    async def load_customer(
        self,
        reader: Any,
        restaurant_id: str,
        email: str,
    ) -> Customer | None:
        raw = await reader.get(keys.customer_key(restaurant_id, email))
        return Customer.model_validate_json(raw) if raw else None

    def stage_customer(self, pipe: Pipeline, customer: Customer) -> None:
        pipe.set(
            keys.customer_key(customer.restaurant_id, customer.email),
            customer.model_dump_json(),
        )

    # Orders

    async def next_order_number(self, moment: datetime) -> str:
        """
        Allocate the next order number for the day of ``moment``.

        The per-day counter is an atomic increment, so concurrent callers
        never receive the same number. A number allocated by an attempt that
        later rolls back is not reused.
        """
        sequence = await self.state.increment(
            keys.order_sequence_key(moment),
            ttl=self.settings.order_number_ttl,
        )
        return f"{moment.strftime('%Y%m%d')}{sequence:03d}"

    async def get_order(
        self,
        order_id: UUID | str,
        restaurant_id: str | None = None,
    ) -> Order | None:
        order = await self.load_order(await self.state.client(), order_id)
        if order and restaurant_id and order.restaurant_id != restaurant_id:
            return None
        return order

    async def load_order(self, reader: Any, order_id: UUID | str) -> Order | None:
        raw = await reader.get(keys.order_key(order_id))
        return Order.model_validate_json(raw) if raw else None

    async def get_order_by_number(self, order_number: str) -> Order | None:
        order_id = await self.state.get(keys.order_number_key(order_number))
        if not order_id:
            return None
        return await self.get_order(str(order_id))

    def stage_order(self, pipe: Pipeline, order: Order, is_new: bool = False) -> None:
        pipe.set(keys.order_key(order.id), order.model_dump_json())
        if is_new:
            pipe.set(keys.order_number_key(order.order_number), str(order.id))
            pipe.zadd(
                keys.restaurant_orders_key(order.restaurant_id),
                {str(order.id): order.created_at.timestamp()},
            )

    async def list_orders(
        self,
        restaurant_id: str,
        filters: OrderFilters | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> OrderPage:
        """List a restaurant's orders, newest first."""
        if page < 1 or page_size < 1:
            raise ValidationError("page and page_size must be positive")

        filters = filters or OrderFilters()
        order_ids = await self.state.sorted_members(keys.restaurant_orders_key(restaurant_id))
        raw_orders = await self.state.get_many([keys.order_key(i) for i in order_ids])

        matching = [
            order
            for order in (Order.model_validate_json(raw) for raw in raw_orders if raw)
            if self._matches(order, filters)
        ]

        start = (page - 1) * page_size
        return OrderPage(
            orders=matching[start:start + page_size],
            page=page,
            page_size=page_size,
            total=len(matching),
            pages=math.ceil(len(matching) / page_size),
        )

    @staticmethod
    def _matches(order: Order, filters: OrderFilters) -> bool:
        if filters.status and order.status not in filters.status:
            return False
        if filters.order_type and order.order_type not in filters.order_type:
            return False
        if filters.customer_id and order.customer_id != filters.customer_id:
            return False
        if filters.date_from and order.created_at < filters.date_from:
            return False
        if filters.date_to and order.created_at > filters.date_to:
            return False
        if filters.search:
            needle = filters.search.lower()
            haystacks = (order.order_number.lower(), order.customer_info.name.lower())
            if not any(needle in h for h in haystacks):
                return False
        return True

"""Stock Ledger - reserves and releases per-item inventory counters."""

from collections import Counter
from typing import Iterable

from pydantic import BaseModel
from redis.asyncio.client import Pipeline

from order_engine.config import get_settings
from order_engine.exceptions import NotFoundError, OutOfStock
from order_engine.models.menu import MenuItem
from order_engine.models.order import OrderLineItem
from order_engine.state import keys
from order_engine.state.repository import OrderRepository
from order_engine.utils.logging import get_logger

logger = get_logger(__name__)


class StockMovement(BaseModel):
    """Planned change to one tracked stock counter."""

    menu_item_id: str
    name: str
    quantity: int
    stock_before: int
    stock_after: int
    low_stock_threshold: int

    @property
    def crossed_low_stock(self) -> bool:
        """True when this decrement takes the item to or below its threshold."""
        return self.stock_before > self.low_stock_threshold >= self.stock_after


def total_quantities(lines: Iterable[tuple[str, int]]) -> dict[str, int]:
    """Sum quantities per menu item across lines."""
    totals: Counter[str] = Counter()
    for menu_item_id, quantity in lines:
        totals[menu_item_id] += quantity
    return dict(totals)


class StockLedger:
    """
    Inventory counters for menu items that track stock.

    Counters live in their own keys. A reservation is checked against values
    read while the counters are watched, then applied as decrements in the
    caller's MULTI block, so it is all-or-nothing across the whole order and
    a counter can never go negative.
    """

    def __init__(self, repository: OrderRepository):
        self.repository = repository
        self.settings = get_settings()

    @staticmethod
    def stock_keys(menu_item_ids: Iterable[str]) -> list[str]:
        return [keys.stock_key(i) for i in menu_item_ids]

    def plan_reservation(
        self,
        menu_items: dict[str, MenuItem],
        quantities: dict[str, int],
    ) -> list[StockMovement]:
        """
        Check every tracked item against its requested quantity.

        ``menu_items`` must have been loaded while their stock keys were
        watched. Raises OutOfStock listing every short item; nothing is
        planned unless every item can be served.
        """
        movements: list[StockMovement] = []
        shortages: list[dict[str, int | str]] = []

        for menu_item_id, quantity in quantities.items():
            item = menu_items[menu_item_id]
            if not item.tracks_stock:
                continue
            if item.stock_count < quantity:
                shortages.append(
                    {
                        "menu_item_id": menu_item_id,
                        "name": item.name,
                        "requested": quantity,
                        "available": item.stock_count,
                    }
                )
                continue

            threshold = item.low_stock_threshold
            if threshold is None:
                threshold = self.settings.low_stock_threshold
            movements.append(
                StockMovement(
                    menu_item_id=menu_item_id,
                    name=item.name,
                    quantity=quantity,
                    stock_before=item.stock_count,
                    stock_after=item.stock_count - quantity,
                    low_stock_threshold=threshold,
                )
            )

        if shortages:
            names = ", ".join(str(s["name"]) for s in shortages)
            raise OutOfStock(f"Insufficient stock for: {names}", items=shortages)

        return movements

    @staticmethod
    def stage_reservation(pipe: Pipeline, movements: list[StockMovement]) -> None:
        for movement in movements:
            pipe.decrby(keys.stock_key(movement.menu_item_id), movement.quantity)

    @staticmethod
    def stage_release(pipe: Pipeline, items: Iterable[OrderLineItem]) -> None:
        """
        Queue increments that give an order's stock back.

        Only counters that still exist are incremented; the watched read in
        the caller decides which those are, so releasing never starts
        tracking stock for an item that stopped tracking it.
        """
        for menu_item_id, quantity in total_quantities(
            (item.menu_item_id, item.quantity) for item in items
        ).items():
            pipe.incrby(keys.stock_key(menu_item_id), quantity)

    async def tracked_items(self, pipe: Pipeline, menu_item_ids: Iterable[str]) -> set[str]:
        """Watch and return the ids whose stock counters exist."""
        ids = list(dict.fromkeys(menu_item_ids))
        if not ids:
            return set()
        stock_keys = self.stock_keys(ids)
        await pipe.watch(*stock_keys)
        raw = await pipe.mget(stock_keys)
        return {item_id for item_id, value in zip(ids, raw) if value is not None}

    async def reserve(self, quantities: dict[str, int]) -> list[StockMovement]:
        """
        Reserve stock in a transaction of its own.

        The lifecycle manager uses ``plan_reservation``/``stage_reservation``
        inside the order transaction instead.
        """
        ids = list(quantities)
        watch = [keys.menu_item_key(i) for i in ids] + self.stock_keys(ids)

        async with self.repository.state.pipeline(*watch) as pipe:
            loaded = await self.repository.load_menu_items(pipe, ids)
            missing = [i for i, item in loaded.items() if item is None]
            if missing:
                raise NotFoundError("Menu item not found", menu_item_ids=missing)

            movements = self.plan_reservation(loaded, quantities)
            pipe.multi()
            self.stage_reservation(pipe, movements)
            await pipe.execute()

        logger.info(
            "stock_reserved",
            items={m.menu_item_id: m.stock_after for m in movements},
        )
        return movements

    async def release(self, items: list[OrderLineItem]) -> None:
        """Give stock back in a transaction of its own."""
        async with self.repository.state.pipeline() as pipe:
            tracked = await self.tracked_items(pipe, (item.menu_item_id for item in items))
            pipe.multi()
            self.stage_release(pipe, [i for i in items if i.menu_item_id in tracked])
            await pipe.execute()

        logger.info("stock_released", menu_item_ids=sorted(tracked))

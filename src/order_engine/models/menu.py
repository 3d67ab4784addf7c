"""Menu catalog models."""

from decimal import Decimal

from pydantic import BaseModel, Field


class MenuItem(BaseModel):
    """Catalog entry belonging to exactly one restaurant."""

    id: str
    restaurant_id: str
    name: str
    category: str = "other"
    price: Decimal = Field(ge=0)
    is_available: bool = True
    # None means stock is not tracked for this item
    stock_count: int | None = Field(default=None, ge=0)
    low_stock_threshold: int | None = Field(default=None, ge=0)

    @property
    def tracks_stock(self) -> bool:
        """Check if inventory is counted for this item."""
        return self.stock_count is not None

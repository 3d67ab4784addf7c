"""Redis key layout for the order engine.

All keys share the ``oe:`` namespace so the engine's data can be located and
cleared without touching anything else in the same database.
"""

from datetime import datetime
from uuid import UUID

NAMESPACE = "oe"

OUTBOX_QUEUE = f"{NAMESPACE}:outbox:events"
OUTBOX_IN_FLIGHT = f"{NAMESPACE}:outbox:in_flight"
OUTBOX_DEAD_LETTER = f"{NAMESPACE}:outbox:dead"
AUDIT_LOG = f"{NAMESPACE}:audit:log"


def restaurant_key(restaurant_id: str) -> str:
    return f"{NAMESPACE}:restaurant:{restaurant_id}"


def menu_item_key(menu_item_id: str) -> str:
    return f"{NAMESPACE}:menu_item:{menu_item_id}"


def stock_key(menu_item_id: str) -> str:
    """Integer stock counter; absent when the item does not track stock."""
    return f"{NAMESPACE}:stock:{menu_item_id}"


def promo_key(restaurant_id: str, code: str) -> str:
    return f"{NAMESPACE}:promo:{restaurant_id}:{code.strip().upper()}"


def promo_uses_key(restaurant_id: str, code: str) -> str:
    return f"{NAMESPACE}:promo_uses:{restaurant_id}:{code.strip().upper()}"


def promo_customer_uses_key(restaurant_id: str, code: str, customer_id: UUID | str) -> str:
    return f"{promo_uses_key(restaurant_id, code)}:customer:{customer_id}"


def customer_key(restaurant_id: str, email: str) -> str:
    return f"{NAMESPACE}:customer:{restaurant_id}:{email.strip().lower()}"


def order_key(order_id: UUID | str) -> str:
    return f"{NAMESPACE}:order:{order_id}"


def order_number_key(order_number: str) -> str:
    return f"{NAMESPACE}:order_number:{order_number}"


def restaurant_orders_key(restaurant_id: str) -> str:
    """Sorted set of order ids scored by creation time."""
    return f"{NAMESPACE}:restaurant:{restaurant_id}:orders"


def order_sequence_key(moment: datetime) -> str:
    return f"{NAMESPACE}:order_seq:{moment.strftime('%Y%m%d')}"

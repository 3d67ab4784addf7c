"""Order status state machine."""

from order_engine.exceptions import InvalidTransition
from order_engine.models.order import OrderStatus, OrderType

TERMINAL_STATUSES = frozenset(
    {OrderStatus.COMPLETED, OrderStatus.CANCELLED, OrderStatus.REFUNDED}
)

# Statuses in which nothing has been prepared yet
PRE_PREPARATION_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.CONFIRMED})


class OrderTransitions:
    """Valid order status transitions."""

    TRANSITIONS = {
        OrderStatus.PENDING: [
            OrderStatus.CONFIRMED,
            OrderStatus.CANCELLED,
            OrderStatus.REFUNDED,
        ],
        OrderStatus.CONFIRMED: [
            OrderStatus.PREPARING,
            OrderStatus.CANCELLED,
            OrderStatus.REFUNDED,
        ],
        OrderStatus.PREPARING: [
            OrderStatus.READY,
            OrderStatus.CANCELLED,
            OrderStatus.REFUNDED,
        ],
        OrderStatus.READY: [
            OrderStatus.OUT_FOR_DELIVERY,
            OrderStatus.DELIVERED,  # Pickup orders are handed over directly
            OrderStatus.CANCELLED,
            OrderStatus.REFUNDED,
        ],
        OrderStatus.OUT_FOR_DELIVERY: [
            OrderStatus.DELIVERED,
            OrderStatus.CANCELLED,
            OrderStatus.REFUNDED,
        ],
        OrderStatus.DELIVERED: [
            OrderStatus.COMPLETED,
            OrderStatus.CANCELLED,
            OrderStatus.REFUNDED,
        ],
        OrderStatus.COMPLETED: [],
        OrderStatus.CANCELLED: [],
        OrderStatus.REFUNDED: [],
    }

    @classmethod
    def is_terminal(cls, status: OrderStatus) -> bool:
        return status in TERMINAL_STATUSES

    @classmethod
    def can_transition(
        cls,
        from_state: OrderStatus,
        to_state: OrderStatus,
        order_type: OrderType | None = None,
    ) -> bool:
        """Check if a state transition is valid."""
        return cls._rejection_reason(from_state, to_state, order_type) is None

    @classmethod
    def validate(
        cls,
        from_state: OrderStatus,
        to_state: OrderStatus,
        order_type: OrderType | None = None,
    ) -> None:
        """Raise ``InvalidTransition`` unless the transition is allowed."""
        reason = cls._rejection_reason(from_state, to_state, order_type)
        if reason is not None:
            raise InvalidTransition(from_state.value, to_state.value, reason)

    @classmethod
    def _rejection_reason(
        cls,
        from_state: OrderStatus,
        to_state: OrderStatus,
        order_type: OrderType | None,
    ) -> str | None:
        if from_state in TERMINAL_STATUSES:
            return f"{from_state.value} is a terminal status"
        if to_state not in cls.TRANSITIONS.get(from_state, []):
            return "transition is not allowed"
        if from_state == OrderStatus.READY:
            if to_state == OrderStatus.OUT_FOR_DELIVERY and order_type == OrderType.PICKUP:
                return "pickup orders are not delivered"
            if to_state == OrderStatus.DELIVERED and order_type == OrderType.DELIVERY:
                return "delivery orders must go out for delivery first"
        return None

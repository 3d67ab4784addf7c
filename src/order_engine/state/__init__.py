"""State management modules."""

from order_engine.state.manager import StateManager, get_state_manager
from order_engine.state.repository import OrderRepository
from order_engine.state.workflow import OrderTransitions

__all__ = ["StateManager", "OrderRepository", "OrderTransitions", "get_state_manager"]

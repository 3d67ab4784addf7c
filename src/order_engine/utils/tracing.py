"""Step timing for order operations."""

import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Generator

from order_engine.utils.clock import utc_now
from order_engine.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class TraceEvent:
    """Individual timed step within one unit of work."""

    timestamp: datetime
    step: str
    operation: str
    reference: str
    duration_ms: float | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


class OrderTracer:
    """Traces the steps of a single order operation."""

    def __init__(self, operation: str, reference: str):
        self.operation = operation
        self.reference = reference
        self.events: list[TraceEvent] = []
        self.start_time = time.perf_counter()

    def add_event(
        self,
        step: str,
        duration_ms: float | None = None,
        **metadata: Any,
    ) -> None:
        """Add a trace event."""
        event = TraceEvent(
            timestamp=utc_now(),
            step=step,
            operation=self.operation,
            reference=self.reference,
            duration_ms=duration_ms,
            metadata=metadata,
        )
        self.events.append(event)

        logger.debug(
            "trace_event",
            operation=self.operation,
            reference=self.reference,
            step=step,
            duration_ms=duration_ms,
            **metadata,
        )

    @contextmanager
    def trace_step(self, step: str, **metadata: Any) -> Generator[None, None, None]:
        """Context manager to trace a step with timing."""
        start = time.perf_counter()
        try:
            yield
        finally:
            duration_ms = (time.perf_counter() - start) * 1000
            self.add_event(step, duration_ms=duration_ms, **metadata)

    @property
    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self.start_time) * 1000

    def get_trace_summary(self) -> dict[str, Any]:
        """Get a summary of the trace."""
        return {
            "operation": self.operation,
            "reference": self.reference,
            "total_duration_ms": self.elapsed_ms,
            "steps": [
                {
                    "timestamp": event.timestamp.isoformat(),
                    "step": event.step,
                    "duration_ms": event.duration_ms,
                    "metadata": event.metadata,
                }
                for event in self.events
            ],
        }

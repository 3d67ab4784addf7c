"""Transactional outbox and the worker that drains it."""

import asyncio
import json
from typing import Awaitable, Callable

from pydantic import ValidationError as PydanticValidationError
from redis.asyncio.client import Pipeline

from order_engine.config import get_settings
from order_engine.exceptions import DependencyError
from order_engine.models.events import OrderEvent
from order_engine.state import keys
from order_engine.state.manager import StateManager
from order_engine.utils.clock import utc_now
from order_engine.utils.logging import ComponentLogger

EventHandler = Callable[[OrderEvent], Awaitable[None]]


class Outbox:
    """Queue of domain events committed together with order state."""

    def __init__(self, state_manager: StateManager):
        self.state = state_manager

    @staticmethod
    def stage(pipe: Pipeline, event: OrderEvent) -> None:
        """Queue an event on a pipeline in MULTI mode."""
        pipe.rpush(keys.OUTBOX_QUEUE, event.model_dump_json())

    async def pending(self) -> list[OrderEvent]:
        raw_events = await self.state.list_range(keys.OUTBOX_QUEUE)
        return [OrderEvent.model_validate_json(raw) for raw in raw_events]

    async def dead_letters(self) -> list[dict]:
        return [json.loads(raw) for raw in await self.state.list_range(keys.OUTBOX_DEAD_LETTER)]


class OutboxWorker:
    """
    Delivers outbox events to side-effect handlers.

    Each event is moved to an in-flight list before handling and removed once
    every handler has run, so events survive a worker crash. Handlers fail
    independently: a failing handler is retried with backoff and then
    dead-lettered without affecting the other handlers or any order.
    """

    def __init__(
        self,
        state_manager: StateManager,
        handlers: dict[str, EventHandler],
    ):
        self.state = state_manager
        self.handlers = handlers
        self.settings = get_settings()
        self.logger = ComponentLogger("outbox_worker")

    async def recover_in_flight(self) -> int:
        """Requeue events a previous worker took but never acknowledged."""
        recovered = 0
        while await self.state.move_head(keys.OUTBOX_IN_FLIGHT, keys.OUTBOX_QUEUE):
            recovered += 1
        if recovered:
            self.logger.log_operation("outbox_recovered", recovered=recovered)
        return recovered

    async def process_next(self) -> bool:
        """Handle one event. Returns False when the queue is empty."""
        raw = await self.state.move_head(keys.OUTBOX_QUEUE, keys.OUTBOX_IN_FLIGHT)
        if raw is None:
            return False

        try:
            event = OrderEvent.model_validate_json(raw)
        except PydanticValidationError as e:
            self.logger.log_error("outbox_event_unreadable", error_detail=str(e))
            await self._dead_letter(raw, handler=None, error=str(e))
            await self.state.remove_value(keys.OUTBOX_IN_FLIGHT, raw)
            return True

        for name, handler in self.handlers.items():
            await self._run_handler(name, handler, event, raw)

        await self.state.remove_value(keys.OUTBOX_IN_FLIGHT, raw)
        self.logger.log_operation(
            "outbox_event_processed",
            order_id=event.entity_id,
            event_type=event.event_type.value,
        )
        return True

    async def drain(self, max_events: int | None = None) -> int:
        """Process events until the queue is empty or ``max_events`` is hit."""
        processed = 0
        while max_events is None or processed < max_events:
            if not await self.process_next():
                break
            processed += 1
        return processed

    async def run(self, stop: asyncio.Event) -> None:
        """
        Process events until ``stop`` is set.

        Store failures never end the loop: the worker logs them, waits one
        poll interval and carries on, requeueing anything the failure left
        in flight before taking new events.
        """
        self.logger.log_operation("outbox_worker_started")
        recovered = False

        while not stop.is_set():
            try:
                if not recovered:
                    await self.recover_in_flight()
                    recovered = True
                if await self.process_next():
                    continue
            except DependencyError as e:
                self.logger.log_error(
                    "outbox_store_unavailable",
                    error_detail=e.message,
                    operation=e.details.get("operation"),
                )
                recovered = False
            await self._wait(stop)

        self.logger.log_operation("outbox_worker_stopped")

    async def _wait(self, stop: asyncio.Event) -> None:
        try:
            await asyncio.wait_for(stop.wait(), timeout=self.settings.outbox_poll_interval)
        except asyncio.TimeoutError:
            pass

    async def _run_handler(
        self,
        name: str,
        handler: EventHandler,
        event: OrderEvent,
        raw: str,
    ) -> bool:
        max_attempts = self.settings.outbox_max_attempts
        retry_delay = self.settings.retry_delay

        for attempt in range(max_attempts):
            try:
                await handler(event)
                return True
            except Exception as e:
                if attempt == max_attempts - 1:
                    self.logger.log_error(
                        "side_effect_failed",
                        handler=name,
                        event_type=event.event_type.value,
                        order_id=event.entity_id,
                        error_detail=str(e),
                    )
                    await self._dead_letter(raw, handler=name, error=str(e))
                    return False

                wait_time = retry_delay * (2**attempt)
                self.logger.log_retry(
                    operation=f"handler:{name}",
                    attempt=attempt + 1,
                    max_retries=max_attempts,
                    wait_seconds=wait_time,
                    error=str(e),
                )
                await asyncio.sleep(wait_time)

        return False

    async def _dead_letter(self, raw: str, handler: str | None, error: str) -> None:
        entry = {
            "handler": handler,
            "error": error,
            "failed_at": utc_now().isoformat(),
            "event": raw,
        }
        await self.state.append(keys.OUTBOX_DEAD_LETTER, json.dumps(entry))

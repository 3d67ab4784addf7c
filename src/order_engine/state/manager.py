"""Redis-based state manager shared by every engine component."""

import json
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import redis.asyncio as redis
from redis.asyncio.client import Pipeline
from redis.exceptions import RedisError, WatchError

from order_engine.config import get_settings
from order_engine.exceptions import ConcurrencyError, DependencyError
from order_engine.utils.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def translate_errors(operation: str) -> AsyncIterator[None]:
    """Map store failures onto the engine's retryable error kinds."""
    try:
        yield
    except WatchError as e:
        raise ConcurrencyError(
            "Concurrent modification detected", operation=operation
        ) from e
    except RedisError as e:
        logger.warning("store_failure", operation=operation, error=str(e))
        raise DependencyError(
            f"Store failure during {operation}", operation=operation, error=str(e)
        ) from e


class StateManager:
    """Centralized state management using Redis."""

    def __init__(self, redis_client: redis.Redis | None = None) -> None:
        settings = get_settings()
        self.redis_client = redis_client
        self.redis_url = settings.redis_url

    async def connect(self) -> None:
        """Establish Redis connection."""
        if self.redis_client is None:
            self.redis_client = await redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            logger.info("redis_connected", url=self.redis_url)

    async def disconnect(self) -> None:
        """Close Redis connection."""
        if self.redis_client:
            await self.redis_client.aclose()
            self.redis_client = None
            logger.info("redis_disconnected")

    async def client(self) -> redis.Redis:
        """Get the connected client, connecting on first use."""
        if not self.redis_client:
            await self.connect()
        return self.redis_client

    @asynccontextmanager
    async def pipeline(self, *watch_keys: str) -> AsyncIterator[Pipeline]:
        """
        Open an optimistic transaction.

        Keys passed here (or to ``pipe.watch`` before ``pipe.multi()``) are
        watched; reads made on the pipeline before ``multi()`` execute
        immediately. Commands queued after ``multi()`` apply atomically on
        ``execute()``, or not at all if a watched key changed meanwhile.
        """
        client = await self.client()
        async with translate_errors("transaction"):
            async with client.pipeline(transaction=True) as pipe:
                if watch_keys:
                    await pipe.watch(*watch_keys)
                yield pipe

    async def set(
        self,
        key: str,
        value: Any,
        ttl: int | None = None,
    ) -> None:
        """Set a value in Redis with optional TTL."""
        client = await self.client()

        # Serialize complex objects to JSON
        if isinstance(value, (dict, list)):
            value = json.dumps(value)

        async with translate_errors("set"):
            await client.set(key, value, ex=ttl)

        logger.debug("state_set", key=key, ttl=ttl)

    async def get(self, key: str) -> Any:
        """Get a value from Redis."""
        client = await self.client()

        async with translate_errors("get"):
            value = await client.get(key)

        if value:
            # Try to deserialize JSON
            try:
                return json.loads(value)
            except (json.JSONDecodeError, TypeError):
                return value

        return None

    async def get_many(self, keys: list[str]) -> list[str | None]:
        """Get raw values for several keys in one round trip."""
        if not keys:
            return []
        client = await self.client()

        async with translate_errors("get_many"):
            return await client.mget(keys)

    async def delete(self, *keys: str) -> None:
        """Delete keys from Redis."""
        client = await self.client()

        async with translate_errors("delete"):
            await client.delete(*keys)
        logger.debug("state_deleted", keys=list(keys))

    async def increment(self, key: str, amount: int = 1, ttl: int | None = None) -> int:
        """Atomically increment a counter, optionally refreshing its TTL."""
        client = await self.client()

        async with translate_errors("increment"):
            value = await client.incrby(key, amount)
            if ttl:
                await client.expire(key, ttl)
        return value

    async def append(self, key: str, value: str) -> int:
        """Append a value to the tail of a list."""
        client = await self.client()

        async with translate_errors("append"):
            return await client.rpush(key, value)

    async def list_range(self, key: str, start: int = 0, end: int = -1) -> list[str]:
        """Get a slice of a list."""
        client = await self.client()

        async with translate_errors("list_range"):
            return await client.lrange(key, start, end)

    async def list_length(self, key: str) -> int:
        client = await self.client()

        async with translate_errors("list_length"):
            return await client.llen(key)

    async def move_head(self, source: str, destination: str) -> str | None:
        """Atomically move the head of one list to the tail of another."""
        client = await self.client()

        async with translate_errors("move_head"):
            return await client.lmove(source, destination, "LEFT", "RIGHT")

    async def remove_value(self, key: str, value: str) -> int:
        """Remove one occurrence of a value from a list."""
        client = await self.client()

        async with translate_errors("remove_value"):
            return await client.lrem(key, 1, value)

    async def sorted_members(self, key: str, newest_first: bool = True) -> list[str]:
        """Get all members of a sorted set ordered by score."""
        client = await self.client()

        async with translate_errors("sorted_members"):
            if newest_first:
                return await client.zrevrange(key, 0, -1)
            return await client.zrange(key, 0, -1)

    async def scan_keys(self, pattern: str) -> list[str]:
        """Collect keys matching a pattern without blocking the server."""
        client = await self.client()

        async with translate_errors("scan_keys"):
            return [key async for key in client.scan_iter(match=pattern)]


# Global state manager instance
_state_manager: StateManager | None = None


async def get_state_manager() -> StateManager:
    """Get the global state manager instance."""
    global _state_manager
    if _state_manager is None:
        _state_manager = StateManager()
        await _state_manager.connect()
    return _state_manager

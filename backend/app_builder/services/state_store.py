"""Key-value stores for per-user builder state.

Production uses Redis; the in-memory store backs tests and single-process
development (``STATE_BACKEND=memory``).
"""

import logging
from typing import Protocol

import redis.asyncio as aioredis

from app_builder.core.config import settings

logger = logging.getLogger(__name__)


class StateStore(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...

    async def close(self) -> None: ...


class RedisStateStore:
    def __init__(self, url: str | None = None):
        self._redis = aioredis.from_url(url or settings.REDIS_URL, decode_responses=True)

    async def get(self, key: str) -> str | None:
        return await self._redis.get(key)

    async def set(self, key: str, value: str) -> None:
        await self._redis.set(key, value)

    async def close(self) -> None:
        await self._redis.aclose()


class InMemoryStateStore:
    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})
        self.writes: list[tuple[str, str]] = []

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.writes.append((key, value))
        self.data[key] = value

    async def close(self) -> None:
        return None


def build_state_store() -> StateStore:
    """Pick the store configured by ``STATE_BACKEND``."""
    if settings.STATE_BACKEND == "memory":
        logger.info("Using in-memory builder state store")
        return InMemoryStateStore()
    return RedisStateStore()

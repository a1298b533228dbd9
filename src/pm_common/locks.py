"""Per-market critical sections for the lifecycle controller.

Every mutating operation on a market runs under hold(f"market:{id}") so its
read-modify-write never interleaves with another on the same market.
Market creation holds "catalog", which serializes the id counter.

LocalMarketLocks is enough for a single worker process. RedisMarketLocks
extends the guarantee across workers sharing one Redis.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Protocol

from redis.exceptions import LockError

from config.settings import settings
from src.pm_common.errors import ResourceBusyError
from src.pm_common.redis_client import get_redis

logger = logging.getLogger(__name__)

CATALOG_LOCK_KEY = "catalog"


def market_lock_key(market_id: int) -> str:
    return f"market:{market_id}"


class MarketLockManager(Protocol):
    def hold(self, key: str) -> AbstractAsyncContextManager[None]: ...


class LocalMarketLocks:
    """One asyncio.Lock per key, dropped once nobody holds or waits on it."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]


class RedisMarketLocks:
    def __init__(
        self,
        timeout: float | None = None,
        blocking_timeout: float | None = None,
        prefix: str = "pm:lock:",
    ) -> None:
        self._timeout = timeout if timeout is not None else settings.LOCK_TIMEOUT_SECONDS
        self._blocking_timeout = (
            blocking_timeout
            if blocking_timeout is not None
            else settings.LOCK_BLOCKING_TIMEOUT_SECONDS
        )
        self._prefix = prefix

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        redis = await get_redis()
        lock = redis.lock(
            f"{self._prefix}{key}",
            timeout=self._timeout,
            blocking_timeout=self._blocking_timeout,
        )
        if not await lock.acquire():
            logger.warning("Lock contention: %s not acquired in %.1fs", key, self._blocking_timeout)
            raise ResourceBusyError(key)
        try:
            yield
        finally:
            try:
                await lock.release()
            except LockError:
                # Key expired mid-operation; the unit of work has already settled.
                logger.warning("Lock %s expired before release", key)


def build_lock_manager() -> MarketLockManager:
    if settings.LOCK_BACKEND == "redis":
        return RedisMarketLocks()
    return LocalMarketLocks()

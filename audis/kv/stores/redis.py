"""Redis implementation of KeyValueStore.

Every Redis failure is wrapped in StoreUnavailableError. Subject locks are
Redis-backed distributed locks, so exclusion holds across processes and
hosts sharing the same Redis instance.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import redis.asyncio as redis

from audis.config.models import StoreConfig
from audis.errors import StoreUnavailableError
from audis.kv.store import KeyValueStore
from audis.observability.logging import get_logger
from audis.observability.metrics import STORE_ERRORS

logger = get_logger(__name__)


class RedisKeyValueStore(KeyValueStore):
    """Redis implementation of KeyValueStore.

    Command mapping:
    - get / set -> GET / SET
    - increment_by -> INCRBY
    - delete -> DEL (multi-key, atomic)
    - list_push_right / list_pop_left / list_range -> RPUSH / LPOP / LRANGE
    - set_add / set_members -> SADD / SMEMBERS
    - acquire_lock -> redis-py Lock at {lock_prefix}{name}
    """

    def __init__(
        self,
        client: redis.Redis,
        config: StoreConfig | None = None,
    ) -> None:
        """Initialize Redis key-value store.

        Args:
            client: Redis client instance, created with decode_responses=True
            config: Store configuration (uses defaults if not provided)
        """
        self._client = client
        self._config = config or StoreConfig()

    @classmethod
    def from_url(cls, url: str, config: StoreConfig | None = None) -> "RedisKeyValueStore":
        """Create a store from a Redis URL.

        Accepts the URL formats redis-py understands, e.g.
        redis://127.0.0.1:6379, redis://localhost, unix:///path/to/redis.sock
        """
        config = config or StoreConfig()
        client = redis.from_url(
            url,
            decode_responses=True,
            socket_timeout=config.socket_timeout,
        )
        return cls(client, config)

    @property
    def client(self) -> redis.Redis:
        """The underlying Redis client."""
        return self._client

    @property
    def reserved_prefixes(self) -> tuple[str, ...]:
        """Lock keys share the keyspace with subject lists."""
        return (self._config.lock_prefix,)

    def _lock_key(self, name: str) -> str:
        """Build Redis lock key."""
        return f"{self._config.lock_prefix}{name}"

    @asynccontextmanager
    async def _call(self, operation: str, key: str) -> AsyncIterator[None]:
        """Translate Redis errors raised inside the block."""
        try:
            yield
        except redis.RedisError as e:
            STORE_ERRORS.labels(operation=operation).inc()
            logger.error(
                "redis_command_error",
                operation=operation,
                key=key,
                error=str(e),
            )
            raise StoreUnavailableError(
                f"Redis {operation} on '{key}' failed: {e}", cause=e
            ) from e

    async def ping(self) -> None:
        """Check that the store is reachable."""
        async with self._call("ping", ""):
            await self._client.ping()

    async def close(self) -> None:
        """Release connections held by the store."""
        await self._client.aclose()

    async def get(self, key: str) -> str | None:
        """Get a string value, or None if the key is absent."""
        async with self._call("get", key):
            return await self._client.get(key)

    async def set(self, key: str, value: str) -> None:
        """Set a string value, overwriting any previous value."""
        async with self._call("set", key):
            await self._client.set(key, value)

    async def increment_by(self, key: str, amount: int) -> int:
        """Add amount to an integer key, creating it at 0 first if absent."""
        async with self._call("incrby", key):
            return int(await self._client.incrby(key, amount))

    async def delete(self, *keys: str) -> int:
        """Delete all given keys in one command, returning how many existed."""
        if not keys:
            return 0
        async with self._call("del", " ".join(keys)):
            return int(await self._client.delete(*keys))

    async def list_push_right(self, key: str, value: str) -> int:
        """Append a value to the tail of a list, returning the new length."""
        async with self._call("rpush", key):
            return int(await self._client.rpush(key, value))

    async def list_pop_left(self, key: str) -> str | None:
        """Remove and return the head of a list, or None if empty."""
        async with self._call("lpop", key):
            return await self._client.lpop(key)

    async def list_range(self, key: str, start: int, stop: int) -> list[str]:
        """Return list elements from start to stop, both inclusive."""
        async with self._call("lrange", key):
            return list(await self._client.lrange(key, start, stop))

    async def set_add(self, key: str, member: str) -> bool:
        """Add a member to a set. Returns True if it was not already present."""
        async with self._call("sadd", key):
            return int(await self._client.sadd(key, member)) == 1

    async def set_members(self, key: str) -> set[str]:
        """Return all members of a set."""
        async with self._call("smembers", key):
            return set(await self._client.smembers(key))

    @asynccontextmanager
    async def acquire_lock(self, name: str) -> AsyncIterator[None]:
        """Hold the named distributed lock for the duration of a block.

        Raises:
            StoreUnavailableError: If the lock is not acquired within
                the blocking timeout, or Redis fails
        """
        lock_key = self._lock_key(name)
        lock = self._client.lock(
            lock_key,
            timeout=self._config.lock_timeout,
            blocking_timeout=self._config.blocking_timeout,
        )

        async with self._call("lock", lock_key):
            acquired = await lock.acquire()
        if not acquired:
            STORE_ERRORS.labels(operation="lock").inc()
            logger.warning("lock_acquire_timeout", lock=lock_key)
            raise StoreUnavailableError(f"Timed out acquiring lock '{lock_key}'")

        try:
            yield
        finally:
            try:
                await lock.release()
            except redis.RedisError as e:
                # Expired under lock_timeout or connection lost; Redis frees it on expiry
                logger.warning(
                    "lock_release_failed",
                    lock=lock_key,
                    error=str(e),
                )

"""Pytest fixtures for Redis integration tests.

Tests run against the database named by TEST_REDIS_URL, which is flushed
before and after every test. Tests skip when Redis is not reachable.
"""

import os
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
import redis.asyncio as redis

from audis.config.models import StoreConfig
from audis.kv import RedisKeyValueStore
from audis.log import AuditLog


@pytest.fixture(scope="session")
def redis_url() -> str:
    """Get Redis URL for tests."""
    return os.environ.get("TEST_REDIS_URL", "redis://localhost:6379/15")


@pytest_asyncio.fixture
async def redis_client(redis_url: str) -> AsyncIterator[redis.Redis]:
    """Create a Redis client on an empty test database.

    Uses function scope to avoid event loop issues across tests.
    """
    client = redis.from_url(redis_url, decode_responses=True)
    try:
        await client.ping()
    except (redis.ConnectionError, OSError):
        await client.aclose()
        pytest.skip(f"Redis not available at {redis_url}")

    await client.flushdb()
    yield client
    await client.flushdb()
    await client.aclose()


@pytest.fixture
def redis_store(redis_client: redis.Redis) -> RedisKeyValueStore:
    """RedisKeyValueStore with short lock timeouts."""
    return RedisKeyValueStore(
        redis_client,
        StoreConfig(lock_timeout=5.0, blocking_timeout=2.0),
    )


@pytest.fixture
def redis_audit_log(redis_store: RedisKeyValueStore) -> AuditLog:
    """AuditLog backed by the test Redis database."""
    return AuditLog(redis_store)

"""Tests for RedisKeyValueStore against a mocked Redis client.

Tests cover:
- Command mapping
- Error translation to StoreUnavailableError
- Lock acquisition, timeout and release
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
import redis.asyncio as redis
from redis.exceptions import LockNotOwnedError

from audis.config.models import StoreConfig
from audis.errors import InvalidEventError, StoreUnavailableError
from audis.kv import RedisKeyValueStore
from audis.log import AuditLog
from audis.models import Event


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def mock_lock():
    """Create mock Redis lock."""
    lock = AsyncMock()
    lock.acquire = AsyncMock(return_value=True)
    lock.release = AsyncMock()
    return lock


@pytest.fixture
def mock_redis(mock_lock):
    """Create mock Redis client."""
    client = AsyncMock()
    client.lock = MagicMock(return_value=mock_lock)
    return client


@pytest.fixture
def store(mock_redis):
    """Create RedisKeyValueStore instance."""
    return RedisKeyValueStore(
        mock_redis,
        StoreConfig(lock_prefix="test-lock:", lock_timeout=10, blocking_timeout=1.5),
    )


# =============================================================================
# Tests: command mapping
# =============================================================================


class TestCommands:
    """Tests for the Redis command behind each operation."""

    @pytest.mark.asyncio
    async def test_get(self, store, mock_redis):
        """get maps to GET."""
        mock_redis.get.return_value = "payload"
        assert await store.get("audit:e1") == "payload"
        mock_redis.get.assert_awaited_once_with("audit:e1")

    @pytest.mark.asyncio
    async def test_set(self, store, mock_redis):
        """set maps to SET."""
        await store.set("audit:e1", "payload")
        mock_redis.set.assert_awaited_once_with("audit:e1", "payload")

    @pytest.mark.asyncio
    async def test_increment_by(self, store, mock_redis):
        """increment_by maps to INCRBY and returns an int."""
        mock_redis.incrby.return_value = 3
        assert await store.increment_by("audit:e1:ref", -1) == 3
        mock_redis.incrby.assert_awaited_once_with("audit:e1:ref", -1)

    @pytest.mark.asyncio
    async def test_delete_is_one_command(self, store, mock_redis):
        """delete sends all keys in a single DEL."""
        mock_redis.delete.return_value = 2
        assert await store.delete("audit:e1:ref", "audit:e1") == 2
        mock_redis.delete.assert_awaited_once_with("audit:e1:ref", "audit:e1")

    @pytest.mark.asyncio
    async def test_delete_nothing(self, store, mock_redis):
        """delete with no keys does not call Redis."""
        assert await store.delete() == 0
        mock_redis.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_list_commands(self, store, mock_redis):
        """List operations map to RPUSH, LPOP and LRANGE."""
        mock_redis.rpush.return_value = 1
        mock_redis.lpop.return_value = "e1"
        mock_redis.lrange.return_value = ["e1", "e2"]

        assert await store.list_push_right("A", "e1") == 1
        assert await store.list_pop_left("A") == "e1"
        assert await store.list_range("A", 0, -1) == ["e1", "e2"]

        mock_redis.rpush.assert_awaited_once_with("A", "e1")
        mock_redis.lpop.assert_awaited_once_with("A")
        mock_redis.lrange.assert_awaited_once_with("A", 0, -1)

    @pytest.mark.asyncio
    async def test_set_commands(self, store, mock_redis):
        """Set operations map to SADD and SMEMBERS."""
        mock_redis.sadd.return_value = 0
        mock_redis.smembers.return_value = {"A", "B"}

        assert await store.set_add("subjects", "A") is False
        assert await store.set_members("subjects") == {"A", "B"}

    @pytest.mark.asyncio
    async def test_close(self, store, mock_redis):
        """close closes the client."""
        await store.close()
        mock_redis.aclose.assert_awaited_once()


# =============================================================================
# Tests: error translation
# =============================================================================


class TestErrors:
    """Tests for wrapping Redis errors."""

    @pytest.mark.asyncio
    async def test_connection_error_wrapped(self, store, mock_redis):
        """Redis connection errors surface as StoreUnavailableError."""
        cause = redis.ConnectionError("connection refused")
        mock_redis.get.side_effect = cause

        with pytest.raises(StoreUnavailableError) as exc_info:
            await store.get("audit:e1")

        assert exc_info.value.cause is cause
        assert exc_info.value.__cause__ is cause

    @pytest.mark.asyncio
    async def test_timeout_wrapped(self, store, mock_redis):
        """Redis timeouts surface as StoreUnavailableError."""
        mock_redis.rpush.side_effect = redis.TimeoutError("timed out")

        with pytest.raises(StoreUnavailableError, match="rpush"):
            await store.list_push_right("A", "e1")

    @pytest.mark.asyncio
    async def test_ping_failure(self, store, mock_redis):
        """A failed ping surfaces as StoreUnavailableError."""
        mock_redis.ping.side_effect = redis.ConnectionError("down")

        with pytest.raises(StoreUnavailableError):
            await store.ping()

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self, store, mock_redis):
        """Non-Redis errors are not wrapped."""
        mock_redis.get.side_effect = KeyError("bug")

        with pytest.raises(KeyError):
            await store.get("audit:e1")


# =============================================================================
# Tests: locks
# =============================================================================


class TestLocks:
    """Tests for acquire_lock."""

    @pytest.mark.asyncio
    async def test_lock_key_and_timeouts(self, store, mock_redis, mock_lock):
        """Builds the lock from prefix and configured timeouts."""
        async with store.acquire_lock("user:42"):
            pass

        mock_redis.lock.assert_called_once_with(
            "test-lock:user:42",
            timeout=10,
            blocking_timeout=1.5,
        )
        mock_lock.acquire.assert_awaited_once()
        mock_lock.release.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_not_acquired_raises(self, store, mock_lock):
        """Raises StoreUnavailableError and never runs the block."""
        mock_lock.acquire.return_value = False
        ran = False

        with pytest.raises(StoreUnavailableError, match="Timed out"):
            async with store.acquire_lock("A"):
                ran = True

        assert ran is False
        mock_lock.release.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_released_on_error(self, store, mock_lock):
        """Releases the lock when the block raises."""
        with pytest.raises(RuntimeError):
            async with store.acquire_lock("A"):
                raise RuntimeError("boom")

        mock_lock.release.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_expired_lock_release_does_not_raise(self, store, mock_lock):
        """A lock that expired while held does not fail the block."""
        mock_lock.release.side_effect = LockNotOwnedError("expired")

        async with store.acquire_lock("A"):
            pass

    @pytest.mark.asyncio
    async def test_acquire_error_wrapped(self, store, mock_lock):
        """Redis errors while acquiring surface as StoreUnavailableError."""
        mock_lock.acquire.side_effect = redis.ConnectionError("down")

        with pytest.raises(StoreUnavailableError):
            async with store.acquire_lock("A"):
                pass


# =============================================================================
# Tests: reserved keys
# =============================================================================


class TestReservedPrefixes:
    """Lock keys share the Redis keyspace with subject lists."""

    def test_lock_prefix_is_reserved(self, store):
        assert store.reserved_prefixes == ("test-lock:",)

    @pytest.mark.asyncio
    async def test_audit_log_rejects_lock_shaped_subject(self, store, mock_redis):
        """Should reject the subject before any Redis command."""
        log = AuditLog(store)

        with pytest.raises(InvalidEventError, match="test-lock:"):
            await log.log(Event(id="e1", data="x", subjects=["A", "test-lock:A"]))

        mock_redis.set.assert_not_awaited()
        mock_redis.lock.assert_not_called()

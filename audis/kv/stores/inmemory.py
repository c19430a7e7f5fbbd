"""In-memory implementation of KeyValueStore."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from audis.errors import StoreUnavailableError
from audis.kv.store import KeyValueStore

Value = str | list[str] | set[str]


class InMemoryKeyValueStore(KeyValueStore):
    """In-memory implementation of KeyValueStore for testing and development.

    Mirrors Redis semantics closely enough for the audit log: one keyspace
    shared by strings, lists and sets, WRONGTYPE errors on mismatched access,
    and empty lists disappearing from the keyspace. Locks are per-name
    asyncio locks, so exclusion only holds within one event loop.
    Not suitable for production use.
    """

    def __init__(self, blocking_timeout: float | None = None) -> None:
        """Initialize empty storage.

        Args:
            blocking_timeout: How long to wait for a lock (seconds), None waits forever
        """
        self._data: dict[str, Value] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._blocking_timeout = blocking_timeout

    def _typed(self, key: str, kind: type) -> Value | None:
        value = self._data.get(key)
        if value is not None and not isinstance(value, kind):
            raise StoreUnavailableError(
                f"WRONGTYPE operation against key '{key}' holding the wrong kind of value"
            )
        return value

    async def ping(self) -> None:
        """Check that the store is reachable."""
        return None

    async def close(self) -> None:
        """Release connections held by the store."""
        return None

    async def get(self, key: str) -> str | None:
        """Get a string value, or None if the key is absent."""
        return self._typed(key, str)  # type: ignore[return-value]

    async def set(self, key: str, value: str) -> None:
        """Set a string value, overwriting any previous value."""
        self._data[key] = value

    async def increment_by(self, key: str, amount: int) -> int:
        """Add amount to an integer key, creating it at 0 first if absent."""
        current = self._typed(key, str) or "0"
        try:
            value = int(current) + amount  # type: ignore[arg-type]
        except ValueError as e:
            raise StoreUnavailableError(
                f"value at '{key}' is not an integer", cause=e
            ) from e
        self._data[key] = str(value)
        return value

    async def delete(self, *keys: str) -> int:
        """Delete all given keys, returning how many existed."""
        deleted = 0
        for key in keys:
            if self._data.pop(key, None) is not None:
                deleted += 1
        return deleted

    async def list_push_right(self, key: str, value: str) -> int:
        """Append a value to the tail of a list, returning the new length."""
        items = self._typed(key, list)
        if items is None:
            items = []
            self._data[key] = items
        items.append(value)  # type: ignore[union-attr]
        return len(items)

    async def list_pop_left(self, key: str) -> str | None:
        """Remove and return the head of a list, or None if empty."""
        items = self._typed(key, list)
        if not items:
            return None
        head = items.pop(0)  # type: ignore[union-attr]
        if not items:
            del self._data[key]
        return head  # type: ignore[return-value]

    async def list_range(self, key: str, start: int, stop: int) -> list[str]:
        """Return list elements from start to stop, both inclusive."""
        items: list[str] = self._typed(key, list) or []  # type: ignore[assignment]
        length = len(items)
        if start < 0:
            start = max(length + start, 0)
        if stop < 0:
            stop = length + stop
        if start >= length or start > stop:
            return []
        return list(items[start : stop + 1])

    async def set_add(self, key: str, member: str) -> bool:
        """Add a member to a set. Returns True if it was not already present."""
        members = self._typed(key, set)
        if members is None:
            members = set()
            self._data[key] = members
        if member in members:
            return False
        members.add(member)  # type: ignore[union-attr]
        return True

    async def set_members(self, key: str) -> set[str]:
        """Return all members of a set."""
        return set(self._typed(key, set) or ())

    @asynccontextmanager
    async def acquire_lock(self, name: str) -> AsyncIterator[None]:
        """Hold the named lock for the duration of a block."""
        lock = self._locks.setdefault(name, asyncio.Lock())
        try:
            await asyncio.wait_for(lock.acquire(), timeout=self._blocking_timeout)
        except TimeoutError as e:
            raise StoreUnavailableError(
                f"Timed out acquiring lock '{name}'", cause=e
            ) from e
        try:
            yield
        finally:
            lock.release()

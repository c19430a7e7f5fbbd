"""KeyValueStore abstract interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager


class KeyValueStore(ABC):
    """Abstract interface for the key-value store housing an audit log.

    Each command is atomic on its own; nothing is atomic across commands.
    Cross-command exclusion is provided by named locks.
    """

    @property
    def reserved_prefixes(self) -> tuple[str, ...]:
        """Key prefixes the store itself writes to, such as lock keys."""
        return ()

    @abstractmethod
    async def ping(self) -> None:
        """Check that the store is reachable."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release connections held by the store."""
        pass

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Get a string value, or None if the key is absent."""
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Set a string value, overwriting any previous value."""
        pass

    @abstractmethod
    async def increment_by(self, key: str, amount: int) -> int:
        """Add amount to an integer key, creating it at 0 first if absent.

        Returns the new value.
        """
        pass

    @abstractmethod
    async def delete(self, *keys: str) -> int:
        """Delete all given keys in one command, returning how many existed."""
        pass

    @abstractmethod
    async def list_push_right(self, key: str, value: str) -> int:
        """Append a value to the tail of a list, returning the new length."""
        pass

    @abstractmethod
    async def list_pop_left(self, key: str) -> str | None:
        """Remove and return the head of a list, or None if empty."""
        pass

    @abstractmethod
    async def list_range(self, key: str, start: int, stop: int) -> list[str]:
        """Return list elements from start to stop, both inclusive.

        Negative indexes count from the tail (-1 is the last element).
        """
        pass

    @abstractmethod
    async def set_add(self, key: str, member: str) -> bool:
        """Add a member to a set. Returns True if it was not already present."""
        pass

    @abstractmethod
    async def set_members(self, key: str) -> set[str]:
        """Return all members of a set."""
        pass

    @abstractmethod
    def acquire_lock(self, name: str) -> AbstractAsyncContextManager[None]:
        """Hold the named mutual-exclusion lock for the duration of a block.

        Usage:
            async with store.acquire_lock("user:42"):
                ...

        The lock is released on every exit path. Locks are not reentrant:
        acquire sequentially, never nested on the same name.
        """
        pass

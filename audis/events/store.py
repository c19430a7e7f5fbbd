"""EventStore: event blobs and their reference counts.

Key structure:
- audit:{id}     - the opaque event payload
- audit:{id}:ref - number of subject lists still containing {id}
"""

from audis.kv.store import KeyValueStore
from audis.observability.logging import get_logger

logger = get_logger(__name__)

EVENT_KEY_PREFIX = "audit:"


def event_key(event_id: str) -> str:
    """Get the blob key for an event."""
    return f"{EVENT_KEY_PREFIX}{event_id}"


def ref_key(event_id: str) -> str:
    """Get the reference count key for an event."""
    return f"{EVENT_KEY_PREFIX}{event_id}:ref"


class EventStore:
    """Owns the event-blob and reference-count keyspace.

    EventStore has no view of subjects. Callers that increment and decrement
    the same event concurrently must serialize those calls themselves.
    """

    def __init__(self, kv: KeyValueStore) -> None:
        self._kv = kv

    async def store(self, event_id: str, data: str) -> None:
        """Write the event blob, overwriting any previous payload."""
        await self._kv.set(event_key(event_id), data)

    async def fetch(self, event_id: str) -> str | None:
        """Read the event blob, or None once it has been collected."""
        return await self._kv.get(event_key(event_id))

    async def increment_ref(self, event_id: str) -> int:
        """Increment the reference count, creating it at 1 if absent."""
        return await self._kv.increment_by(ref_key(event_id), 1)

    async def decrement_and_maybe_collect(self, event_id: str) -> bool:
        """Decrement the reference count, collecting the event at zero.

        Count and blob are removed by a single multi-key delete, so the blob
        never disappears while the count key still shows a positive value.

        Returns:
            True if the event was garbage-collected
        """
        remaining = await self._kv.increment_by(ref_key(event_id), -1)
        if remaining > 0:
            return False

        await self._kv.delete(ref_key(event_id), event_key(event_id))
        logger.debug("event_collected", event_id=event_id, remaining=remaining)
        return True

    async def reference_count(self, event_id: str) -> int:
        """Current reference count, 0 when the event does not exist."""
        value = await self._kv.get(ref_key(event_id))
        return int(value) if value is not None else 0

"""SubjectIndex: per-subject event lists and the subject registry.

Key structure:
- {subject}  - list of event ids, oldest at the head
- subjects   - set of every subject ever logged to
"""

from collections.abc import AsyncIterator

from audis.kv.store import KeyValueStore

SUBJECTS_KEY = "subjects"


class SubjectIndex:
    """Owns the per-subject ordered lists and the global subject registry.

    The registry only grows; a subject stays discoverable after its list
    has been pruned empty.
    """

    def __init__(self, kv: KeyValueStore) -> None:
        self._kv = kv

    async def register_subject(self, subject: str) -> None:
        """Add a subject to the registry. No-op if already present."""
        await self._kv.set_add(SUBJECTS_KEY, subject)

    async def append_event(self, subject: str, event_id: str) -> int:
        """Push an event id to the tail of the subject's list.

        Returns:
            The new list length
        """
        return await self._kv.list_push_right(subject, event_id)

    async def list_events(self, subject: str) -> list[str]:
        """Snapshot of the subject's event ids, oldest first.

        Every call re-reads the store.
        """
        return await self._kv.list_range(subject, 0, -1)

    async def iter_events(self, subject: str) -> AsyncIterator[str]:
        """Iterate the subject's event ids, oldest first.

        The snapshot is taken when iteration starts.
        """
        for event_id in await self.list_events(subject):
            yield event_id

    async def pop_oldest(self, subject: str) -> str | None:
        """Remove and return the head of the subject's list, or None if empty."""
        return await self._kv.list_pop_left(subject)

    async def all_subjects(self) -> set[str]:
        """Every subject ever registered."""
        return await self._kv.set_members(SUBJECTS_KEY)

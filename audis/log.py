"""AuditLog: the multi-index audit log.

An audit log consists of zero or more events, each indexed against one or
more subjects. One key-value store houses exactly one audit log.

Four kinds of objects live in the store:
- audit:{id}      the event payload, read in O(1)
- audit:{id}:ref  how many subject lists still reference the event
- {subject}       the subject's event ids, in insertion order
- subjects        the set of all known subjects, for discovery

Every mutation of a subject list (log's append, truncate, purge) runs under
that subject's lock, so operations on one subject are totally ordered.
Operations on different subjects are not, and logging against several
subjects is not atomic across them.
"""

from types import TracebackType

from audis.errors import InvalidEventError, NotFoundError
from audis.events import EVENT_KEY_PREFIX, EventStore
from audis.kv.store import KeyValueStore
from audis.models import AuditRecord, Event, PruneResult
from audis.observability.logging import get_logger
from audis.observability.metrics import (
    EVENTS_COLLECTED,
    EVENTS_LOGGED,
    EVENTS_PRUNED,
    SUBJECT_APPENDS,
)
from audis.subjects import SUBJECTS_KEY, SubjectIndex

logger = get_logger(__name__)


class AuditLog:
    """Multi-index audit log over a KeyValueStore."""

    def __init__(self, kv: KeyValueStore) -> None:
        """Initialize the audit log.

        Args:
            kv: Store housing the audit log
        """
        self._kv = kv
        self._events = EventStore(kv)
        self._index = SubjectIndex(kv)

    async def __aenter__(self) -> "AuditLog":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    @property
    def store(self) -> KeyValueStore:
        """The key-value store housing this audit log."""
        return self._kv

    @property
    def events(self) -> EventStore:
        """Event blob and reference count storage."""
        return self._events

    @property
    def index(self) -> SubjectIndex:
        """Subject lists and registry."""
        return self._index

    async def close(self) -> None:
        """Close the underlying store."""
        await self._kv.close()

    # ------------------------------------------------------------------
    # Logging and retrieval
    # ------------------------------------------------------------------

    async def log(self, event: Event) -> None:
        """Log an event against each of its subjects.

        The blob is written first. Then, per subject and under that subject's
        lock, the subject is registered, the id appended and the reference
        count incremented, in that order. When the increment creates the
        count, the blob is written again inside the lock, so a prune that
        collected the event in between cannot leave the id without a blob.

        Raises:
            InvalidEventError: If the id or subject list is empty, or a
                subject is empty, reserved, or shaped like an event or lock
                key. Nothing is written.
            StoreUnavailableError: If a store call fails. Subjects processed
                before the failure keep their entry.
        """
        self._validate(event)

        await self._events.store(event.id, event.data)
        for subject in event.subjects:
            async with self._kv.acquire_lock(subject):
                await self._index.register_subject(subject)
                await self._index.append_event(subject, event.id)
                if await self._events.increment_ref(event.id) == 1:
                    # A prune may have collected the blob since it was written
                    await self._events.store(event.id, event.data)
            SUBJECT_APPENDS.inc()

        EVENTS_LOGGED.inc()
        logger.debug(
            "event_logged",
            event_id=event.id,
            subject_count=len(event.subjects),
        )

    async def retrieve(self, subject: str) -> list[str]:
        """Return the payloads logged against a subject, oldest first.

        Events collected by a concurrent prune are skipped, so the result
        may be shorter than the subject list was.
        """
        return [record.data for record in await self.retrieve_events(subject)]

    async def retrieve_events(self, subject: str) -> list[AuditRecord]:
        """Return the events logged against a subject, oldest first, with ids."""
        records: list[AuditRecord] = []
        async for event_id in self._index.iter_events(subject):
            data = await self._events.fetch(event_id)
            if data is None:
                continue
            records.append(AuditRecord(id=event_id, data=data))
        return records

    async def subjects(self) -> set[str]:
        """Return the set of all known subjects."""
        return await self._index.all_subjects()

    # ------------------------------------------------------------------
    # Pruning
    # ------------------------------------------------------------------

    async def truncate(self, subject: str, keep: int) -> PruneResult:
        """Truncate a subject so that it only holds its `keep` newest events.

        A `keep` of zero or less empties the subject. Truncating a subject
        that is already short enough changes nothing.
        """
        result = PruneResult(subject=subject)
        async with self._kv.acquire_lock(subject):
            length = len(await self._index.list_events(subject))
            for _ in range(length - max(keep, 0)):
                event_id = await self._index.pop_oldest(subject)
                if event_id is None:
                    break
                await self._release(event_id, result)

        EVENTS_PRUNED.labels(operation="truncate").inc(result.removed_count)
        logger.info(
            "subject_truncated",
            subject=subject,
            keep=keep,
            removed=result.removed_count,
            collected=len(result.collected),
        )
        return result

    async def purge(self, subject: str, last_id: str) -> PruneResult:
        """Delete the event `last_id` and all older events from a subject.

        Raises:
            NotFoundError: If the subject empties without meeting `last_id`.
                The subject is left empty; the error carries what was removed.
        """
        result = PruneResult(subject=subject)
        async with self._kv.acquire_lock(subject):
            while True:
                event_id = await self._index.pop_oldest(subject)
                if event_id is None:
                    EVENTS_PRUNED.labels(operation="purge").inc(result.removed_count)
                    logger.warning(
                        "purge_target_not_found",
                        subject=subject,
                        last_id=last_id,
                        removed=result.removed_count,
                    )
                    raise NotFoundError(
                        f"Event '{last_id}' not found in subject '{subject}'",
                        result=result,
                    )
                await self._release(event_id, result)
                if event_id == last_id:
                    break

        EVENTS_PRUNED.labels(operation="purge").inc(result.removed_count)
        logger.info(
            "subject_purged",
            subject=subject,
            last_id=last_id,
            removed=result.removed_count,
            collected=len(result.collected),
        )
        return result

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _release(self, event_id: str, result: PruneResult) -> None:
        """Drop one subject reference to a popped event."""
        result.removed.append(event_id)
        if await self._events.decrement_and_maybe_collect(event_id):
            result.collected.append(event_id)
            EVENTS_COLLECTED.inc()

    def _validate(self, event: Event) -> None:
        if not event.id:
            raise InvalidEventError("Event id must not be empty")
        if not event.subjects:
            raise InvalidEventError(f"Event '{event.id}' has no subjects")
        for subject in event.subjects:
            if not subject:
                raise InvalidEventError(f"Event '{event.id}' has an empty subject")
            if subject == SUBJECTS_KEY:
                raise InvalidEventError(
                    f"Subject '{SUBJECTS_KEY}' is reserved for the subject registry"
                )
            for prefix in (EVENT_KEY_PREFIX, *self._kv.reserved_prefixes):
                if subject.startswith(prefix):
                    raise InvalidEventError(
                        f"Subject '{subject}' uses the reserved key prefix '{prefix}'"
                    )

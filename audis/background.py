"""Delegating event logging to a background task.

A bounded queue feeds a single worker that logs events one at a time, so
callers are not slowed down by momentary hiccups in the store.

Usage:
    async with BackgroundLogger(audit_log, queue_size=50) as background:
        await background.submit(event)
    # leaving the block drains the queue and stops the worker
"""

import asyncio
from types import TracebackType

from audis.config.models import DEFAULT_QUEUE_SIZE
from audis.errors import AudisError
from audis.log import AuditLog
from audis.models import Event
from audis.observability.logging import get_logger

logger = get_logger(__name__)


class BackgroundLogger:
    """Buffered background logger for an AuditLog.

    Failures to log an event are reported and the worker moves on to the
    next event.
    """

    def __init__(self, audit_log: AuditLog, queue_size: int = DEFAULT_QUEUE_SIZE) -> None:
        """Initialize the background logger.

        Args:
            audit_log: Audit log to write events to
            queue_size: Events buffered before submit() waits; <= 0 uses the default
        """
        self._audit_log = audit_log
        self._queue: asyncio.Queue[Event | None] = asyncio.Queue(
            maxsize=queue_size if queue_size > 0 else DEFAULT_QUEUE_SIZE
        )
        self._worker_task: asyncio.Task[None] | None = None
        self._closed = False
        self._failed = 0

    async def __aenter__(self) -> "BackgroundLogger":
        self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    @property
    def maxsize(self) -> int:
        """Capacity of the buffer."""
        return self._queue.maxsize

    @property
    def failed(self) -> int:
        """Number of events the worker failed to log."""
        return self._failed

    @property
    def running(self) -> bool:
        """Whether the worker task is alive."""
        return self._worker_task is not None and not self._worker_task.done()

    def start(self) -> None:
        """Start the worker task. Must be called from a running event loop."""
        if self._closed:
            raise RuntimeError("BackgroundLogger is closed")
        if not self.running:
            self._worker_task = asyncio.create_task(self._worker())

    async def submit(self, event: Event) -> None:
        """Queue an event for logging, waiting while the buffer is full."""
        if self._closed:
            raise RuntimeError("BackgroundLogger is closed")
        if not self.running:
            self.start()
        await self._queue.put(event)

    async def close(self) -> None:
        """Log everything still queued, then stop the worker."""
        if self._closed:
            return
        self._closed = True
        if self._worker_task is None:
            return
        if self.running:
            await self._queue.put(None)
        await self._worker_task

    async def _worker(self) -> None:
        """Log queued events sequentially until the stop marker arrives."""
        while True:
            event = await self._queue.get()
            try:
                if event is None:
                    return
                await self._audit_log.log(event)
            except AudisError as e:
                self._failed += 1
                logger.error(
                    "background_log_failed",
                    event_id=event.id,
                    error=str(e),
                )
            finally:
                self._queue.task_done()

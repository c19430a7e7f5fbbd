"""audis - a multi-index audit log built atop a key-value store.

An audit log consists of zero or more events, each indexed against one or
more subjects. Events are appended once, never mutated, retrieved by
subject, and pruned from the oldest end with truncate() and purge().

Example
-------
>>> import audis
>>> log = audis.AuditLog(audis.InMemoryKeyValueStore())
>>> await log.log(audis.Event(id="e1", data="x", subjects=["A", "B"]))
>>> await log.retrieve("A")
['x']
"""

__version__: str = "0.3.0"

from audis.background import BackgroundLogger
from audis.client import connect
from audis.errors import (
    AudisError,
    InvalidEventError,
    NotFoundError,
    StoreUnavailableError,
)
from audis.events import EventStore
from audis.kv import InMemoryKeyValueStore, KeyValueStore, RedisKeyValueStore
from audis.log import AuditLog
from audis.models import AuditRecord, Event, PruneResult
from audis.subjects import SubjectIndex

__all__ = [
    "__version__",
    # Core
    "AuditLog",
    "EventStore",
    "SubjectIndex",
    "connect",
    # Models
    "AuditRecord",
    "Event",
    "PruneResult",
    # Errors
    "AudisError",
    "InvalidEventError",
    "NotFoundError",
    "StoreUnavailableError",
    # Stores
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "RedisKeyValueStore",
    # Background
    "BackgroundLogger",
]

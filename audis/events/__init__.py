"""Event blob storage."""

from audis.events.store import EVENT_KEY_PREFIX, EventStore, event_key, ref_key

__all__ = [
    "EVENT_KEY_PREFIX",
    "EventStore",
    "event_key",
    "ref_key",
]

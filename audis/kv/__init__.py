"""Key-value store adapters for the audit log."""

from audis.kv.store import KeyValueStore
from audis.kv.stores import InMemoryKeyValueStore, RedisKeyValueStore

__all__ = [
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "RedisKeyValueStore",
]

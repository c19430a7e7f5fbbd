"""Key-value store implementations."""

from audis.kv.stores.inmemory import InMemoryKeyValueStore
from audis.kv.stores.redis import RedisKeyValueStore

__all__ = [
    "InMemoryKeyValueStore",
    "RedisKeyValueStore",
]

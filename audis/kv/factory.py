"""KeyValueStore factory for creating backend instances."""

from audis.config.models import StoreConfig
from audis.kv.store import KeyValueStore
from audis.kv.stores.inmemory import InMemoryKeyValueStore
from audis.kv.stores.redis import RedisKeyValueStore
from audis.observability.logging import get_logger

logger = get_logger(__name__)


def create_store(url: str, config: StoreConfig) -> KeyValueStore:
    """Create a KeyValueStore instance based on configuration.

    Args:
        url: Redis URL, ignored by the inmemory backend
        config: Store configuration from settings

    Returns:
        Configured KeyValueStore instance

    Raises:
        ValueError: If backend type is not supported
    """
    backend = config.backend

    if backend == "inmemory":
        logger.info("creating_store", backend="inmemory")
        return InMemoryKeyValueStore(blocking_timeout=config.blocking_timeout)

    elif backend == "redis":
        logger.info(
            "creating_store",
            backend="redis",
            url=url,
            lock_prefix=config.lock_prefix,
        )
        return RedisKeyValueStore.from_url(url, config)

    else:
        raise ValueError(f"Unsupported store backend: {backend}")

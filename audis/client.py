"""Connecting to an audit log.

Usage:
    import audis

    async with await audis.connect("redis://127.0.0.1:6379") as log:
        await log.log(audis.Event(id="foo1", data='{"some":"data"}',
                                  subjects=["system", "user:42"]))
        for subject in await log.subjects():
            print(subject, await log.retrieve(subject))
"""

from audis.config import Settings, get_settings
from audis.kv.factory import create_store
from audis.log import AuditLog
from audis.observability.logging import get_logger

logger = get_logger(__name__)


async def connect(url: str | None = None, settings: Settings | None = None) -> AuditLog:
    """Connect to the store housing an audit log, by URL.

    Understands the URL formats redis-py understands, primarily:
    - redis://127.0.0.1:6379
    - redis://localhost
    - unix:///path/to/redis.sock

    The store is pinged before returning.

    Args:
        url: Store URL, defaults to the configured host
        settings: Settings to use, defaults to get_settings()

    Raises:
        StoreUnavailableError: If the store cannot be reached
    """
    settings = settings or get_settings()
    url = url or settings.host

    store = create_store(url, settings.store)
    try:
        await store.ping()
    except Exception:
        await store.close()
        raise

    logger.debug("audit_log_connected", url=url, backend=settings.store.backend)
    return AuditLog(store)

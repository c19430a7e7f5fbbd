"""Configuration model exports.

    from audis.config.models import StoreConfig, ObservabilityConfig
"""

from audis.config.models.background import DEFAULT_QUEUE_SIZE, BackgroundConfig
from audis.config.models.observability import LoggingConfig, ObservabilityConfig
from audis.config.models.store import StoreConfig

__all__ = [
    "BackgroundConfig",
    "DEFAULT_QUEUE_SIZE",
    "LoggingConfig",
    "ObservabilityConfig",
    "StoreConfig",
]

"""Key-value store backend configuration."""

from typing import Literal

from pydantic import BaseModel, Field

BackendType = Literal["redis", "inmemory"]


class StoreConfig(BaseModel):
    """Configuration for the key-value store holding the audit log."""

    backend: BackendType = Field(
        default="redis",
        description="Backend type",
    )
    lock_prefix: str = Field(
        default="auditlock:",
        min_length=1,
        description="Key prefix for per-subject locks",
    )
    lock_timeout: float = Field(
        default=30.0,
        gt=0,
        description="How long a subject lock is held before auto-release (seconds)",
    )
    blocking_timeout: float = Field(
        default=5.0,
        gt=0,
        description="How long to wait when acquiring a subject lock (seconds)",
    )
    socket_timeout: float | None = Field(
        default=5.0,
        gt=0,
        description="Socket timeout for store calls (seconds)",
    )

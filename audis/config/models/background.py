"""Background logger configuration."""

from pydantic import BaseModel, Field

DEFAULT_QUEUE_SIZE = 100


class BackgroundConfig(BaseModel):
    """Configuration for the buffered background logger."""

    queue_size: int = Field(
        default=DEFAULT_QUEUE_SIZE,
        description="Events buffered before submit() waits; <= 0 uses the default",
    )

"""Result model for pruning operations."""

from pydantic import BaseModel, Field


class PruneResult(BaseModel):
    """Outcome of a truncate or purge on one subject."""

    subject: str = Field(..., description="Pruned subject")
    removed: list[str] = Field(
        default_factory=list,
        description="Event ids popped from the subject, oldest first",
    )
    collected: list[str] = Field(
        default_factory=list,
        description="Event ids whose blob was garbage-collected",
    )

    @property
    def removed_count(self) -> int:
        """Number of ids popped from the subject list."""
        return len(self.removed)

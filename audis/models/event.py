"""Event models for the audit log."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Event(BaseModel):
    """An event, suitable for logging in the audit log.

    The payload is opaque to the log. Subjects are deduplicated on
    construction, keeping the order in which they first appear.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Globally unique, caller-assigned identifier")
    data: str = Field(..., description="Opaque event payload")
    subjects: list[str] = Field(
        default_factory=list,
        description="Subjects to index this event against",
    )

    @field_validator("subjects")
    @classmethod
    def collapse_duplicates(cls, v: list[str]) -> list[str]:
        """Drop repeated subjects, keeping first-seen order."""
        return list(dict.fromkeys(v))


class AuditRecord(BaseModel):
    """A single resolved entry from a subject's event list."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Event identifier")
    data: str = Field(..., description="Event payload")

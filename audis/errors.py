"""Error hierarchy for the audit log.

Every backend failure is wrapped in StoreUnavailableError so callers only
ever handle AudisError subclasses.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from audis.models import PruneResult


class AudisError(Exception):
    """Base exception for all audit log errors."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class InvalidEventError(AudisError):
    """Raised when an event is rejected before touching the store.

    Examples:
        - Empty event id
        - No subjects to index the event against
    """

    pass


class StoreUnavailableError(AudisError):
    """Raised when the underlying key-value store call fails.

    Examples:
        - Redis server unavailable
        - Network or socket timeout
        - Protocol error (e.g. WRONGTYPE)
        - Subject lock not acquired within the blocking timeout
    """

    pass


class NotFoundError(AudisError):
    """Raised when purge drains a subject without meeting the target id.

    The subject list is left drained. ``result`` holds what was removed
    before the list ran out.
    """

    def __init__(
        self,
        message: str,
        result: "PruneResult | None" = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.result = result

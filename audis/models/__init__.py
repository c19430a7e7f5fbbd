"""Audit log models.

- Event for incoming audit events
- AuditRecord for resolved entries of a subject log
- PruneResult for truncate/purge outcomes
"""

from audis.models.event import AuditRecord, Event
from audis.models.prune import PruneResult

__all__ = [
    "AuditRecord",
    "Event",
    "PruneResult",
]

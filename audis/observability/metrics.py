"""Prometheus metrics for the audit log."""

from prometheus_client import Counter

EVENTS_LOGGED = Counter(
    "audis_events_logged_total",
    "Total number of events logged",
)

SUBJECT_APPENDS = Counter(
    "audis_subject_appends_total",
    "Total number of event ids appended to subject lists",
)

EVENTS_PRUNED = Counter(
    "audis_events_pruned_total",
    "Total number of event ids removed from subject lists",
    labelnames=["operation"],
)

EVENTS_COLLECTED = Counter(
    "audis_events_collected_total",
    "Total number of event blobs garbage-collected",
)

STORE_ERRORS = Counter(
    "audis_store_errors_total",
    "Total number of failed store operations",
    labelnames=["operation"],
)

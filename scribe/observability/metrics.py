"""Prometheus metrics for Scribe.

Tracks audit record production, dispatch health and the latency the
audit layer adds around store operations.
"""

from prometheus_client import Counter, Gauge, Histogram

# Audit record metrics
AUDIT_RECORDS = Counter(
    "scribe_audit_records_total",
    "Total number of audit records built and handed to dispatch",
    labelnames=["acted_on", "action"],
)

AUDIT_DISPATCH_FAILURES = Counter(
    "scribe_audit_dispatch_failures_total",
    "Total number of audit dispatches that failed",
    labelnames=["acted_on", "stage"],
)

AUDIT_DISPATCH_DROPPED = Counter(
    "scribe_audit_dispatch_dropped_total",
    "Total number of audit dispatches dropped because too many were pending",
    labelnames=["acted_on"],
)

AUDIT_PENDING_DISPATCHES = Gauge(
    "scribe_audit_pending_dispatches",
    "Number of detached audit appends not yet finished",
)

# Store operation metrics
STORE_OPERATION_LATENCY = Histogram(
    "scribe_store_operation_latency_seconds",
    "Latency of audited store operations, snapshot reads included",
    labelnames=["acted_on", "operation"],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

"""Audit domain models."""

from scribe.audit.models.record import (
    UNKNOWN_ACTOR,
    AuditAction,
    AuditRecord,
    utc_now,
)

__all__ = [
    "AuditAction",
    "AuditRecord",
    "UNKNOWN_ACTOR",
    "utc_now",
]

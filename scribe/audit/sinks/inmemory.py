"""In-memory implementation of AuditSink."""

from typing import Any

from scribe.audit.models import AuditAction, AuditRecord
from scribe.audit.sink import AuditSink


class InMemoryAuditSink(AuditSink):
    """In-memory implementation of AuditSink for testing and development.

    Keeps records in append order. Not suitable for production use.
    """

    def __init__(self) -> None:
        """Initialize empty storage."""
        self._records: list[AuditRecord] = []

    async def append(self, record: AuditRecord) -> None:
        """Append one record."""
        self._records.append(record)

    async def append_batch(self, records: list[AuditRecord]) -> None:
        """Append several records."""
        self._records.extend(records)

    @property
    def records(self) -> list[AuditRecord]:
        """All records in append order."""
        return list(self._records)

    def list_by_entity(self, acted_on: str, entity_id: Any) -> list[AuditRecord]:
        """List the history of one entity, oldest first."""
        return [
            record
            for record in self._records
            if record.acted_on == acted_on and record.entity_id == entity_id
        ]

    def list_by_action_key(
        self,
        action_key: str,
        *,
        action: AuditAction | None = None,
        limit: int = 100,
    ) -> list[AuditRecord]:
        """List records of an audit category, most recent first."""
        results = [
            record
            for record in self._records
            if record.action_key == action_key
            and (action is None or record.action == action)
        ]
        results.sort(key=lambda x: x.acted_at, reverse=True)
        return results[:limit]

    def clear(self) -> None:
        """Remove all records."""
        self._records.clear()

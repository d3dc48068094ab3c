"""PostgreSQL implementation of AuditSink.

Uses asyncpg for async database access. Records are insert-only.
"""

import json

from scribe.audit.models import AuditRecord
from scribe.audit.sink import AuditSink
from scribe.db.pool import PostgresPool
from scribe.observability.logging import get_logger
from scribe.store.errors import ConnectionError

logger = get_logger(__name__)


class PostgresAuditSink(AuditSink):
    """PostgreSQL implementation of AuditSink.

    Uses asyncpg connection pool for efficient database access.
    All records are immutable once written.
    """

    def __init__(self, pool: PostgresPool, table: str = "audit_logs") -> None:
        """Initialize with connection pool.

        Args:
            pool: PostgreSQL connection pool
            table: Audit log table name
        """
        self._pool = pool
        self._table = table

    @staticmethod
    def _to_row(record: AuditRecord) -> tuple:
        payload = record.to_payload()
        return (
            record.acted_at,
            record.actor,
            record.action.value,
            json.dumps(payload["before"]) if record.before is not None else None,
            json.dumps(payload["after"]) if record.after is not None else None,
            str(payload["entityId"]),
            record.acted_on,
            record.action_key,
        )

    async def append(self, record: AuditRecord) -> None:
        """Append one record."""
        await self.append_batch([record])

    async def append_batch(self, records: list[AuditRecord]) -> None:
        """Append several records in one transaction."""
        if not records:
            return
        try:
            async with self._pool.acquire() as conn:
                async with conn.transaction():
                    await conn.executemany(
                        f"""
                        INSERT INTO {self._table} (
                            acted_at, actor, action, before, after,
                            entity_id, acted_on, action_key
                        ) VALUES ($1, $2, $3, $4::jsonb, $5::jsonb, $6, $7, $8)
                        """,
                        [self._to_row(record) for record in records],
                    )
            logger.debug(
                "audit_records_appended",
                count=len(records),
                acted_on=records[0].acted_on,
            )
        except Exception as e:
            logger.error(
                "postgres_append_audit_error",
                count=len(records),
                error=str(e),
            )
            raise ConnectionError(f"Failed to append audit records: {e}", cause=e) from e

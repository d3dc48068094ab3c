"""Audit sink backends and factory."""

from scribe.audit.sink import AuditSink
from scribe.audit.sinks.inmemory import InMemoryAuditSink
from scribe.audit.sinks.postgres import PostgresAuditSink
from scribe.config.models.audit import AuditConfig
from scribe.db.pool import PostgresPool
from scribe.observability.logging import get_logger

logger = get_logger(__name__)


async def create_audit_sink(
    config: AuditConfig,
    pool: PostgresPool | None = None,
) -> AuditSink:
    """Create the audit sink selected by configuration.

    Falls back to an in-memory sink when the Postgres backend is configured
    but the database cannot be reached.

    Args:
        config: Audit configuration
        pool: Shared PostgreSQL pool, created from environment if None

    Returns:
        AuditSink instance
    """
    if config.sink == "inmemory":
        logger.info("audit_sink_initialized", sink_type="inmemory")
        return InMemoryAuditSink()

    pool = pool or PostgresPool()
    if not pool.is_connected:
        try:
            await pool.connect()
        except Exception as e:
            logger.warning("audit_sink_postgres_failed_using_inmemory", error=str(e))
            return InMemoryAuditSink()

    logger.info("audit_sink_initialized", sink_type="postgres", table=config.table)
    return PostgresAuditSink(pool, table=config.table)


__all__ = [
    "AuditSink",
    "InMemoryAuditSink",
    "PostgresAuditSink",
    "create_audit_sink",
]

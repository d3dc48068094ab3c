"""Build audited stores from settings."""

from scribe.audit.decorator import AuditedStore
from scribe.audit.dispatch import AuditDispatcher
from scribe.audit.identity import ActorResolver
from scribe.audit.sink import AuditSink, sink_provider
from scribe.audit.sinks import create_audit_sink
from scribe.config.settings import Settings
from scribe.db.pool import PostgresPool
from scribe.observability.logging import get_logger
from scribe.store.interface import ID, E, EntityStore

logger = get_logger(__name__)


def create_dispatcher(settings: Settings, sink: AuditSink) -> AuditDispatcher:
    """Create a dispatcher configured from the audit settings section."""
    return AuditDispatcher(
        sink_provider(sink),
        max_pending=settings.audit.max_pending,
        log_payload_on_failure=settings.audit.log_payload_on_failure,
        record_metrics=settings.observability.metrics.enabled,
    )


async def create_audited_store(
    store: EntityStore[E, ID],
    *,
    action_key: str,
    settings: Settings,
    actor_resolver: ActorResolver | None = None,
    dispatcher: AuditDispatcher | None = None,
    pool: PostgresPool | None = None,
    acted_on: str | None = None,
) -> AuditedStore[E, ID]:
    """Wrap a store with auditing as configured by settings.

    With ``audit.enabled`` false the resolver is not wired, so the returned
    store only delegates.

    Args:
        store: Store to wrap
        action_key: Grouping label for the records
        settings: Loaded settings
        actor_resolver: Resolves the acting principal
        dispatcher: Dispatcher to share between stores; built from settings if None
        pool: PostgreSQL pool for the Postgres sink
        acted_on: Entity type tag override
    """
    if not settings.audit.enabled:
        actor_resolver = None
    if dispatcher is None:
        sink = await create_audit_sink(settings.audit, pool)
        dispatcher = create_dispatcher(settings, sink)

    logger.info(
        "audited_store_created",
        acted_on=acted_on or store.entity_type.__name__,
        action_key=action_key,
        audit_enabled=actor_resolver is not None,
    )
    return AuditedStore(
        store,
        action_key=action_key,
        dispatcher=dispatcher,
        actor_resolver=actor_resolver,
        acted_on=acted_on,
        record_metrics=settings.observability.metrics.enabled,
    )

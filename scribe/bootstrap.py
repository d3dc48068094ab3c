"""Bootstrap module for wiring Scribe from configuration.

Handles:
- Loading configuration from TOML files
- Configuring structured logging
- Creating the shared PostgreSQL pool, audit sink and dispatcher
- Creating entity stores wrapped with auditing

Example usage:

    from scribe.bootstrap import bootstrap, shutdown

    ctx = await bootstrap()
    invoices = await ctx.audited(Invoice, action_key="billing", actor_resolver=current_user)
    await invoices.create({"amount": 10})
    await shutdown(ctx)
"""

from dataclasses import dataclass
from typing import Any

from scribe.audit.decorator import AuditedStore
from scribe.audit.dispatch import AuditDispatcher
from scribe.audit.factory import create_audited_store, create_dispatcher
from scribe.audit.identity import ActorResolver
from scribe.audit.sink import AuditSink
from scribe.audit.sinks import create_audit_sink
from scribe.config import get_settings
from scribe.config.settings import Settings
from scribe.db.pool import PostgresPool
from scribe.observability.logging import get_logger, setup_logging
from scribe.store.interface import EntityStore
from scribe.store.models import Entity
from scribe.store.stores.inmemory import InMemoryEntityStore
from scribe.store.stores.postgres import PostgresEntityStore

logger = get_logger(__name__)


@dataclass
class BootstrapContext:
    """Shared resources created by bootstrap."""

    settings: Settings
    pool: PostgresPool | None
    sink: AuditSink
    dispatcher: AuditDispatcher

    def create_store(self, entity_type: type[Entity], **kwargs: Any) -> EntityStore:
        """Create a plain entity store for the configured backend."""
        if self.settings.storage.entities == "postgres" and self.pool is not None:
            return PostgresEntityStore(
                self.pool,
                entity_type,
                table=self.settings.storage.entities_table,
                **kwargs,
            )
        return InMemoryEntityStore(entity_type, **kwargs)

    async def audited(
        self,
        entity_type: type[Entity],
        *,
        action_key: str,
        actor_resolver: ActorResolver | None = None,
        acted_on: str | None = None,
        **kwargs: Any,
    ) -> AuditedStore:
        """Create an entity store wrapped with auditing, sharing the dispatcher."""
        return await create_audited_store(
            self.create_store(entity_type, **kwargs),
            action_key=action_key,
            settings=self.settings,
            actor_resolver=actor_resolver,
            dispatcher=self.dispatcher,
            acted_on=acted_on,
        )


async def bootstrap(settings: Settings | None = None) -> BootstrapContext:
    """Create the shared Scribe resources.

    Args:
        settings: Settings to use, loaded from config files if None

    Returns:
        BootstrapContext with pool, sink and dispatcher
    """
    settings = settings or get_settings()
    logging_config = settings.observability.logging
    setup_logging(
        level=logging_config.level,
        format=logging_config.format,
        redact_pii=logging_config.redact_pii,
    )

    uses_postgres = (
        settings.audit.sink == "postgres" or settings.storage.entities == "postgres"
    )
    pool = PostgresPool.from_config(settings.storage.postgres) if uses_postgres else None
    if pool is not None:
        await pool.connect()

    sink = await create_audit_sink(settings.audit, pool)
    dispatcher = create_dispatcher(settings, sink)

    logger.info(
        "scribe_bootstrapped",
        app_name=settings.app_name,
        sink_type=type(sink).__name__,
        entity_backend=settings.storage.entities,
    )
    return BootstrapContext(
        settings=settings,
        pool=pool,
        sink=sink,
        dispatcher=dispatcher,
    )


async def shutdown(ctx: BootstrapContext) -> None:
    """Wait for pending audit appends, then close the pool."""
    await ctx.dispatcher.drain()
    if ctx.pool is not None:
        await ctx.pool.close()
    logger.info("scribe_shutdown")

"""AuditedStore: audit-interception decorator for any EntityStore.

Wraps a store with the identical operation surface. Every mutating
operation delegates to the wrapped store and, when an actor resolver is
configured, builds one AuditRecord per affected entity and hands the batch
to an AuditDispatcher without waiting for the append.

Snapshot reads are not isolated from concurrent writers: the pre-read, the
mutation and the post-read run as separate store calls.
"""

import time
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Generic

from scribe.audit.dispatch import AuditDispatcher
from scribe.audit.identity import ActorResolver, actor_id_of
from scribe.audit.models import AuditAction, AuditRecord, utc_now
from scribe.audit.sink import SinkProvider
from scribe.observability.logging import get_logger
from scribe.observability.metrics import (
    AUDIT_DISPATCH_FAILURES,
    AUDIT_RECORDS,
    STORE_OPERATION_LATENCY,
)
from scribe.store.errors import NotFoundError
from scribe.store.interface import ID, E, EntityStore
from scribe.store.models import Count, DataObject, Where

logger = get_logger(__name__)


class AuditedStore(EntityStore[E, ID], Generic[E, ID]):
    """EntityStore decorator that records an audit trail of mutations.

    Auditing is switched on by passing ``actor_resolver``. Without it every
    operation is a plain delegation: no snapshot reads, no records.

    Results and errors of the wrapped store reach the caller unchanged.
    Actor resolution errors propagate; for inserts they surface after the
    insert has committed, for the other mutations before the store is touched.
    Failures after the mutation committed (post-read, sink acquisition, append)
    are logged and never raised.

    Usage:
        audited = AuditedStore(
            store,
            action_key="billing",
            sink_provider=sink_provider(sink),
            actor_resolver=current_user,
        )
        invoice = await audited.create({"amount": 10})
    """

    def __init__(
        self,
        store: EntityStore[E, ID],
        *,
        action_key: str,
        sink_provider: SinkProvider | None = None,
        dispatcher: AuditDispatcher | None = None,
        actor_resolver: ActorResolver | None = None,
        acted_on: str | None = None,
        record_metrics: bool = True,
    ) -> None:
        """Wrap a store.

        Args:
            store: Store to delegate to
            action_key: Grouping label written on every record
            sink_provider: Acquires the audit sink (ignored if dispatcher is given)
            dispatcher: Shared dispatcher, e.g. to drain all stores at shutdown
            actor_resolver: Resolves the acting principal; None disables auditing
            acted_on: Entity type tag, defaults to the entity model name
            record_metrics: Whether to record Prometheus metrics
        """
        if dispatcher is None:
            if sink_provider is None:
                raise ValueError("AuditedStore needs a sink_provider or a dispatcher")
            dispatcher = AuditDispatcher(sink_provider, record_metrics=record_metrics)

        self._store = store
        self._action_key = action_key
        self._dispatcher = dispatcher
        self._actor_resolver = actor_resolver
        self._acted_on = acted_on or store.entity_type.__name__
        self._record_metrics = record_metrics

    @property
    def entity_type(self) -> type[E]:
        return self._store.entity_type

    @property
    def wrapped(self) -> EntityStore[E, ID]:
        """The decorated store."""
        return self._store

    @property
    def dispatcher(self) -> AuditDispatcher:
        return self._dispatcher

    @property
    def audit_enabled(self) -> bool:
        return self._actor_resolver is not None

    @property
    def acted_on(self) -> str:
        return self._acted_on

    @property
    def action_key(self) -> str:
        return self._action_key

    # Record construction
    def _record(
        self,
        action: AuditAction,
        actor: str,
        acted_at: datetime,
        entity_id: Any,
        *,
        before: E | None = None,
        after: E | None = None,
    ) -> AuditRecord:
        if self._record_metrics:
            AUDIT_RECORDS.labels(acted_on=self._acted_on, action=action.value).inc()
        return AuditRecord(
            acted_at=acted_at,
            actor=actor,
            action=action,
            before=before.to_snapshot() if before is not None else None,
            after=after.to_snapshot() if after is not None else None,
            entity_id=entity_id,
            acted_on=self._acted_on,
            action_key=self._action_key,
        )

    @contextmanager
    def _timed(self, operation: str) -> Iterator[None]:
        start = time.perf_counter()
        try:
            yield
        finally:
            if self._record_metrics:
                STORE_OPERATION_LATENCY.labels(
                    acted_on=self._acted_on, operation=operation
                ).observe(time.perf_counter() - start)

    async def _read_after(self, read: Callable[[], Awaitable[Any]], operation: str) -> Any:
        """Run a post-mutation snapshot read; failures are logged, not raised."""
        try:
            return await read()
        except Exception as e:
            if self._record_metrics:
                AUDIT_DISPATCH_FAILURES.labels(
                    acted_on=self._acted_on, stage="snapshot"
                ).inc()
            logger.error(
                "audit_snapshot_failed",
                acted_on=self._acted_on,
                operation=operation,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None

    # Create operations
    async def create(self, data: DataObject) -> E:
        """Create one entity and audit it as INSERT_ONE."""
        resolver = self._actor_resolver
        if resolver is None:
            return await self._store.create(data)

        with self._timed("create"):
            acted_at = utc_now()
            created = await self._store.create(data)
            actor = actor_id_of(await resolver())
            await self._dispatcher.dispatch(
                self._record(
                    AuditAction.INSERT_ONE,
                    actor,
                    acted_at,
                    created.get_id(),
                    after=created,
                )
            )
            return created

    async def create_all(self, data: list[DataObject]) -> list[E]:
        """Create several entities and audit each as INSERT_MANY."""
        resolver = self._actor_resolver
        if resolver is None:
            return await self._store.create_all(data)

        with self._timed("create_all"):
            acted_at = utc_now()
            created = await self._store.create_all(data)
            actor = actor_id_of(await resolver())
            await self._dispatcher.dispatch_batch([
                self._record(
                    AuditAction.INSERT_MANY,
                    actor,
                    acted_at,
                    entity.get_id(),
                    after=entity,
                )
                for entity in created
            ])
            return created

    # Read operations
    async def find(self, where: Where | None = None) -> list[E]:
        return await self._store.find(where)

    async def find_by_id(self, entity_id: ID) -> E:
        return await self._store.find_by_id(entity_id)

    async def count(self, where: Where | None = None) -> Count:
        return await self._store.count(where)

    # Update operations
    async def update_all(self, data: DataObject, where: Where | None = None) -> Count:
        """Patch matching entities and audit each as UPDATE_MANY.

        Post-state is re-read with the same predicate. Pre-matched entities
        the patch moved out of the predicate are re-read by identifier so
        their record is kept. Entities seen only after the update have no
        before snapshot and are not audited.
        """
        resolver = self._actor_resolver
        if resolver is None:
            return await self._store.update_all(data, where)

        with self._timed("update_all"):
            acted_at = utc_now()
            before_map = {entity.get_id(): entity for entity in await self._store.find(where)}
            actor = actor_id_of(await resolver())
            result = await self._store.update_all(data, where)

            after_list = await self._read_after(lambda: self._store.find(where), "update_all")
            if after_list is None:
                return result
            after_map = {entity.get_id(): entity for entity in after_list}

            unexpected = [eid for eid in after_map if eid not in before_map]
            if unexpected:
                logger.warning(
                    "audit_before_snapshot_missing",
                    acted_on=self._acted_on,
                    entity_ids=[str(eid) for eid in unexpected],
                )

            records: list[AuditRecord] = []
            for entity_id, before in before_map.items():
                after = after_map.get(entity_id)
                if after is None:
                    after = await self._find_after(entity_id)
                if after is None:
                    continue
                records.append(
                    self._record(
                        AuditAction.UPDATE_MANY,
                        actor,
                        acted_at,
                        entity_id,
                        before=before,
                        after=after,
                    )
                )

            await self._dispatcher.dispatch_batch(records)
            return result

    async def _find_after(self, entity_id: ID) -> E | None:
        try:
            return await self._store.find_by_id(entity_id)
        except NotFoundError:
            logger.warning(
                "audit_after_snapshot_missing",
                acted_on=self._acted_on,
                entity_id=str(entity_id),
            )
            return None
        except Exception as e:
            if self._record_metrics:
                AUDIT_DISPATCH_FAILURES.labels(
                    acted_on=self._acted_on, stage="snapshot"
                ).inc()
            logger.error(
                "audit_snapshot_failed",
                acted_on=self._acted_on,
                entity_id=str(entity_id),
                error=str(e),
                error_type=type(e).__name__,
            )
            return None

    async def _audited_update(
        self,
        operation: str,
        entity_id: ID,
        mutate: Callable[[], Awaitable[None]],
        resolver: ActorResolver,
    ) -> None:
        with self._timed(operation):
            acted_at = utc_now()
            before = await self._store.find_by_id(entity_id)
            actor = actor_id_of(await resolver())
            await mutate()

            after = await self._read_after(
                lambda: self._store.find_by_id(entity_id), operation
            )
            if after is None:
                return
            await self._dispatcher.dispatch(
                self._record(
                    AuditAction.UPDATE_ONE,
                    actor,
                    acted_at,
                    before.get_id(),
                    before=before,
                    after=after,
                )
            )

    async def update_by_id(self, entity_id: ID, data: DataObject) -> None:
        """Patch one entity and audit it as UPDATE_ONE."""
        resolver = self._actor_resolver
        if resolver is None:
            return await self._store.update_by_id(entity_id, data)
        await self._audited_update(
            "update_by_id",
            entity_id,
            lambda: self._store.update_by_id(entity_id, data),
            resolver,
        )

    async def replace_by_id(self, entity_id: ID, data: DataObject) -> None:
        """Replace one entity and audit it as UPDATE_ONE."""
        resolver = self._actor_resolver
        if resolver is None:
            return await self._store.replace_by_id(entity_id, data)
        await self._audited_update(
            "replace_by_id",
            entity_id,
            lambda: self._store.replace_by_id(entity_id, data),
            resolver,
        )

    # Delete operations
    async def delete_all(self, where: Where | None = None) -> Count:
        """Delete matching entities and audit each pre-matched one as DELETE_MANY."""
        resolver = self._actor_resolver
        if resolver is None:
            return await self._store.delete_all(where)

        with self._timed("delete_all"):
            acted_at = utc_now()
            doomed = await self._store.find(where)
            actor = actor_id_of(await resolver())
            result = await self._store.delete_all(where)

            await self._dispatcher.dispatch_batch([
                self._record(
                    AuditAction.DELETE_MANY,
                    actor,
                    acted_at,
                    entity.get_id(),
                    before=entity,
                )
                for entity in doomed
            ])
            return result

    async def delete_by_id(self, entity_id: ID) -> None:
        """Delete one entity and audit it as DELETE_ONE."""
        resolver = self._actor_resolver
        if resolver is None:
            return await self._store.delete_by_id(entity_id)

        with self._timed("delete_by_id"):
            acted_at = utc_now()
            before = await self._store.find_by_id(entity_id)
            actor = actor_id_of(await resolver())
            await self._store.delete_by_id(entity_id)

            await self._dispatcher.dispatch(
                self._record(
                    AuditAction.DELETE_ONE,
                    actor,
                    acted_at,
                    before.get_id(),
                    before=before,
                )
            )

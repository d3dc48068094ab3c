"""Tests for building audited stores from settings."""

from typing import Any

import pytest

from scribe.audit import (
    AuditedStore,
    InMemoryAuditSink,
    create_audited_store,
    create_dispatcher,
    static_actor,
)
from scribe.bootstrap import BootstrapContext, bootstrap, shutdown
from scribe.config.settings import Settings
from scribe.store.stores.inmemory import InMemoryEntityStore
from tests.factories import Task, TaskFactory


def inmemory_settings(**overrides: Any) -> Settings:
    audit = {"sink": "inmemory", **overrides.pop("audit", {})}
    return Settings(audit=audit, storage={"entities": "inmemory"}, **overrides)


class TestCreateAuditedStore:
    """Tests for create_audited_store."""

    @pytest.mark.asyncio
    async def test_enabled_wires_actor(self, task_store):
        """Should audit when audit.enabled is true."""
        audited = await create_audited_store(
            task_store,
            action_key="tasks",
            settings=inmemory_settings(),
            actor_resolver=static_actor("u1"),
        )
        assert isinstance(audited, AuditedStore)
        assert audited.audit_enabled is True

    @pytest.mark.asyncio
    async def test_disabled_drops_actor(self, task_store):
        """Should only delegate when audit.enabled is false."""
        audited = await create_audited_store(
            task_store,
            action_key="tasks",
            settings=inmemory_settings(audit={"enabled": False}),
            actor_resolver=static_actor("u1"),
        )
        assert audited.audit_enabled is False

    @pytest.mark.asyncio
    async def test_shared_dispatcher(self, task_store):
        """Should reuse a given dispatcher."""
        settings = inmemory_settings(audit={"max_pending": 3})
        sink = InMemoryAuditSink()
        dispatcher = create_dispatcher(settings, sink)

        audited = await create_audited_store(
            task_store,
            action_key="tasks",
            settings=settings,
            actor_resolver=static_actor("u1"),
            dispatcher=dispatcher,
        )
        await audited.create(TaskFactory.data())
        await dispatcher.drain()

        assert audited.dispatcher is dispatcher
        assert len(sink.records) == 1


class TestBootstrap:
    """Tests for bootstrap and shutdown."""

    @pytest.mark.asyncio
    async def test_inmemory_bootstrap(self):
        """Should build in-memory resources without a pool."""
        ctx = await bootstrap(inmemory_settings())

        assert isinstance(ctx, BootstrapContext)
        assert ctx.pool is None
        assert isinstance(ctx.sink, InMemoryAuditSink)

        tasks = await ctx.audited(
            Task, action_key="tasks", actor_resolver=static_actor("u1")
        )
        assert isinstance(tasks.wrapped, InMemoryEntityStore)
        await tasks.create(TaskFactory.data())

        await shutdown(ctx)
        assert len(ctx.sink.records) == 1
        assert ctx.sink.records[0].acted_on == "Task"

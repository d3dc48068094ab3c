"""Tests for Prometheus metrics."""

from typing import Any

import pytest
from prometheus_client import REGISTRY

from scribe.audit import AuditDispatcher, AuditedStore, sink_provider, static_actor
from scribe.observability.metrics import (
    AUDIT_DISPATCH_DROPPED,
    AUDIT_DISPATCH_FAILURES,
    AUDIT_PENDING_DISPATCHES,
    AUDIT_RECORDS,
    STORE_OPERATION_LATENCY,
)
from scribe.store.stores.inmemory import InMemoryEntityStore
from tests.factories import FailingAuditSink, Task, TaskFactory


def sample(name: str, **labels: Any) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


class TestMetricDefinitions:
    """Metrics are registered under the scribe prefix."""

    def test_metrics_exist(self) -> None:
        for metric in (
            AUDIT_RECORDS,
            AUDIT_DISPATCH_FAILURES,
            AUDIT_DISPATCH_DROPPED,
            AUDIT_PENDING_DISPATCHES,
            STORE_OPERATION_LATENCY,
        ):
            assert metric is not None


class TestAuditMetrics:
    """Audited operations update the metrics."""

    @pytest.mark.asyncio
    async def test_records_and_failures_counted(self) -> None:
        """Should count built records and failed appends."""
        acted_on = "MetricsTask"
        records_before = sample(
            "scribe_audit_records_total", acted_on=acted_on, action="INSERT_MANY"
        )
        failures_before = sample(
            "scribe_audit_dispatch_failures_total", acted_on=acted_on, stage="append"
        )
        dispatcher = AuditDispatcher(sink_provider(FailingAuditSink()))
        audited = AuditedStore(
            InMemoryEntityStore(Task),
            action_key="tasks",
            dispatcher=dispatcher,
            actor_resolver=static_actor("u1"),
            acted_on=acted_on,
        )

        await audited.create_all([TaskFactory.data(), TaskFactory.data()])
        await dispatcher.drain()

        assert sample(
            "scribe_audit_records_total", acted_on=acted_on, action="INSERT_MANY"
        ) == records_before + 2
        assert sample(
            "scribe_audit_dispatch_failures_total", acted_on=acted_on, stage="append"
        ) == failures_before + 1
        assert sample(
            "scribe_store_operation_latency_seconds_count",
            acted_on=acted_on,
            operation="create_all",
        ) >= 1

    @pytest.mark.asyncio
    async def test_metrics_can_be_disabled(self) -> None:
        """Should leave counters untouched when record_metrics is false."""
        acted_on = "QuietTask"
        audited = AuditedStore(
            InMemoryEntityStore(Task),
            action_key="tasks",
            sink_provider=sink_provider(FailingAuditSink()),
            actor_resolver=static_actor("u1"),
            acted_on=acted_on,
            record_metrics=False,
        )

        await audited.create(TaskFactory.data())
        await audited.dispatcher.drain()

        assert sample(
            "scribe_audit_records_total", acted_on=acted_on, action="INSERT_ONE"
        ) == 0.0

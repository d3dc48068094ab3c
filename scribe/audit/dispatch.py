"""Detached dispatch of audit records to an AuditSink.

The append runs as an asyncio task that the mutating caller never awaits.
Failures are written to the diagnostic log together with the serialized
records so they can be recovered by hand; they are never retried and never
raised.
"""

import asyncio
from typing import Any

from scribe.audit.models import AuditRecord
from scribe.audit.sink import AuditSink, SinkProvider
from scribe.observability.logging import get_logger
from scribe.observability.metrics import (
    AUDIT_DISPATCH_DROPPED,
    AUDIT_DISPATCH_FAILURES,
    AUDIT_PENDING_DISPATCHES,
)

logger = get_logger(__name__)


class AuditDispatcher:
    """Hands audit records to a sink without blocking on the append.

    Sink acquisition happens on the caller's path; the append itself is
    scheduled as a detached task. In-flight tasks are referenced until they
    finish so the event loop does not collect them early.

    With ``max_pending`` set, a dispatch arriving while that many appends are
    still running is dropped and logged instead of queued.
    """

    def __init__(
        self,
        sink_provider: SinkProvider,
        *,
        max_pending: int | None = None,
        log_payload_on_failure: bool = True,
        record_metrics: bool = True,
    ) -> None:
        self._sink_provider = sink_provider
        self._max_pending = max_pending
        self._log_payload = log_payload_on_failure
        self._record_metrics = record_metrics
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        """Number of appends scheduled but not finished."""
        return len(self._pending)

    async def dispatch(self, record: AuditRecord) -> None:
        """Dispatch one record through ``AuditSink.append``."""
        await self._dispatch([record], batch=False)

    async def dispatch_batch(self, records: list[AuditRecord]) -> None:
        """Dispatch records through ``AuditSink.append_batch``. Empty is a no-op."""
        if records:
            await self._dispatch(records, batch=True)

    async def drain(self) -> None:
        """Wait until every in-flight append has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def _dispatch(self, records: list[AuditRecord], *, batch: bool) -> None:
        acted_on = records[0].acted_on
        if self._max_pending is not None and len(self._pending) >= self._max_pending:
            if self._record_metrics:
                AUDIT_DISPATCH_DROPPED.labels(acted_on=acted_on).inc()
            logger.error(
                "audit_dispatch_dropped",
                acted_on=acted_on,
                pending=len(self._pending),
                **self._failure_context(records),
            )
            return

        try:
            sink = await self._sink_provider()
        except Exception as e:
            self._report_failure("acquire", records, e)
            return

        task = asyncio.create_task(self._run(sink, records, batch))
        self._pending.add(task)
        if self._record_metrics:
            AUDIT_PENDING_DISPATCHES.inc()
        task.add_done_callback(self._forget)

    async def _run(
        self, sink: AuditSink, records: list[AuditRecord], batch: bool
    ) -> None:
        try:
            if batch:
                await sink.append_batch(records)
            else:
                await sink.append(records[0])
        except Exception as e:
            self._report_failure("append", records, e)

    def _forget(self, task: asyncio.Task[None]) -> None:
        self._pending.discard(task)
        if self._record_metrics:
            AUDIT_PENDING_DISPATCHES.dec()

    def _failure_context(self, records: list[AuditRecord]) -> dict[str, Any]:
        context: dict[str, Any] = {"count": len(records)}
        if self._log_payload:
            context["records"] = [record.to_payload() for record in records]
        return context

    def _report_failure(
        self, stage: str, records: list[AuditRecord], error: Exception
    ) -> None:
        acted_on = records[0].acted_on
        if self._record_metrics:
            AUDIT_DISPATCH_FAILURES.labels(acted_on=acted_on, stage=stage).inc()
        logger.error(
            "audit_dispatch_failed",
            stage=stage,
            acted_on=acted_on,
            error=str(error),
            error_type=type(error).__name__,
            **self._failure_context(records),
        )

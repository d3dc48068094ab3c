"""Audit sink doubles."""

import asyncio

from scribe.audit.models import AuditRecord
from scribe.audit.sinks import InMemoryAuditSink


class FailingAuditSink(InMemoryAuditSink):
    """Sink whose appends always raise."""

    def __init__(self) -> None:
        super().__init__()
        self.attempts = 0
        self.rejected: list[AuditRecord] = []

    async def append(self, record: AuditRecord) -> None:
        self.attempts += 1
        self.rejected.append(record)
        raise RuntimeError("audit sink unavailable")

    async def append_batch(self, records: list[AuditRecord]) -> None:
        self.attempts += 1
        self.rejected.extend(records)
        raise RuntimeError("audit sink unavailable")


class SlowAuditSink(InMemoryAuditSink):
    """Sink whose appends block until released."""

    def __init__(self) -> None:
        super().__init__()
        self.release = asyncio.Event()
        self.started = 0

    async def append(self, record: AuditRecord) -> None:
        self.started += 1
        await self.release.wait()
        await super().append(record)

    async def append_batch(self, records: list[AuditRecord]) -> None:
        self.started += 1
        await self.release.wait()
        await super().append_batch(records)

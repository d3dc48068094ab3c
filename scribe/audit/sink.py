"""AuditSink abstract interface."""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable

from scribe.audit.models import AuditRecord


class AuditSink(ABC):
    """Append-only destination for audit records.

    Implementations may fail; callers on the audit path absorb failures.
    """

    @abstractmethod
    async def append(self, record: AuditRecord) -> None:
        """Append one record."""
        pass

    @abstractmethod
    async def append_batch(self, records: list[AuditRecord]) -> None:
        """Append several records in one operation."""
        pass


# Acquires the sink; acquisition itself may suspend or fail
SinkProvider = Callable[[], Awaitable[AuditSink]]


def sink_provider(sink: AuditSink) -> SinkProvider:
    """Wrap an already built sink as a SinkProvider."""

    async def provide() -> AuditSink:
        return sink

    return provide

"""Test factories for creating test data."""

from tests.factories.entities import Task, TaskFactory
from tests.factories.sinks import FailingAuditSink, SlowAuditSink

__all__ = [
    "FailingAuditSink",
    "SlowAuditSink",
    "Task",
    "TaskFactory",
]

"""Audit domain.

Contains the audit-interception layer:
- AuditRecord / AuditAction models
- Actor resolution
- AuditSink interface and backends
- Detached dispatch
- AuditedStore decorator
"""

from scribe.audit.decorator import AuditedStore
from scribe.audit.dispatch import AuditDispatcher
from scribe.audit.factory import create_audited_store, create_dispatcher
from scribe.audit.identity import Actor, ActorResolver, actor_id_of, static_actor
from scribe.audit.models import UNKNOWN_ACTOR, AuditAction, AuditRecord
from scribe.audit.sink import AuditSink, SinkProvider, sink_provider
from scribe.audit.sinks import InMemoryAuditSink, PostgresAuditSink, create_audit_sink

__all__ = [
    "Actor",
    "ActorResolver",
    "AuditAction",
    "AuditDispatcher",
    "AuditRecord",
    "AuditSink",
    "AuditedStore",
    "InMemoryAuditSink",
    "PostgresAuditSink",
    "SinkProvider",
    "UNKNOWN_ACTOR",
    "actor_id_of",
    "create_audit_sink",
    "create_audited_store",
    "create_dispatcher",
    "sink_provider",
    "static_actor",
]

"""Audit layer configuration models."""

from typing import Literal

from pydantic import BaseModel, Field

SinkBackendType = Literal["inmemory", "postgres"]


class AuditConfig(BaseModel):
    """Configuration for audit record dispatch."""

    enabled: bool = Field(
        default=True,
        description="Wire an actor resolver into audited stores built from settings",
    )
    sink: SinkBackendType = Field(
        default="postgres",
        description="Audit sink backend",
    )
    table: str = Field(
        default="audit_logs",
        pattern=r"^[a-z_][a-z0-9_]*$",
        description="Table the Postgres sink appends to",
    )
    max_pending: int | None = Field(
        default=None,
        gt=0,
        description="Drop dispatches beyond this many in-flight appends (None = unbounded)",
    )
    log_payload_on_failure: bool = Field(
        default=True,
        description="Include serialized records in dispatch failure logs",
    )

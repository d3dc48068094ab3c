"""AuditRecord model for the audit domain."""

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Actor value recorded when the acting principal has no resolvable id
UNKNOWN_ACTOR = "0"


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class AuditAction(str, Enum):
    """Kind and cardinality of an audited mutation."""

    INSERT_ONE = "INSERT_ONE"
    INSERT_MANY = "INSERT_MANY"
    UPDATE_ONE = "UPDATE_ONE"
    UPDATE_MANY = "UPDATE_MANY"
    DELETE_ONE = "DELETE_ONE"
    DELETE_MANY = "DELETE_MANY"


class AuditRecord(BaseModel):
    """Immutable record of one mutation applied to one entity.

    Written once and never updated. Serialized field names are camelCase
    (``actedAt``, ``entityId``, ...) and form the schema sinks persist.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    acted_at: datetime = Field(default_factory=utc_now, description="Capture time")
    actor: str = Field(default=UNKNOWN_ACTOR, description="Acting principal id")
    action: AuditAction = Field(..., description="Mutation kind")
    before: dict[str, Any] | None = Field(
        default=None, description="Entity snapshot prior to mutation"
    )
    after: dict[str, Any] | None = Field(
        default=None, description="Entity snapshot after mutation"
    )
    entity_id: Any = Field(..., description="Identifier of the affected entity")
    acted_on: str = Field(..., description="Entity type name")
    action_key: str = Field(..., description="Caller-supplied grouping label")

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the JSON-compatible camelCase shape."""
        return self.model_dump(mode="json", by_alias=True)

"""Entity, predicate and result models shared by all entity stores."""

from collections.abc import Mapping
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

# Field name -> expected value, or an operator mapping ({"inq": [...]}, {"neq": x})
Where = Mapping[str, Any]

# Partial or complete entity data passed to create/update operations
DataObject = Mapping[str, Any]

WHERE_OPERATORS: frozenset[str] = frozenset({"inq", "neq"})


class Entity(BaseModel):
    """Base model for entities kept in an EntityStore.

    Subclasses declare their fields, including the identifier field named by
    ``id_field``. Entities know how to serialize themselves to a snapshot,
    which is what audit records carry as before/after state.
    """

    model_config = ConfigDict(extra="forbid")

    id_field: ClassVar[str] = "id"

    def get_id(self) -> Any:
        """Return the entity identifier."""
        return getattr(self, self.id_field)

    def to_snapshot(self) -> dict[str, Any]:
        """Serialize the entity to a JSON-compatible snapshot."""
        return self.model_dump(mode="json")


class Count(BaseModel):
    """Number of entities affected by a bulk operation."""

    model_config = ConfigDict(frozen=True)

    count: int = Field(..., ge=0, description="Affected entity count")


def _is_operator(expected: Any) -> bool:
    return (
        isinstance(expected, Mapping)
        and len(expected) == 1
        and next(iter(expected)) in WHERE_OPERATORS
    )


def matches_where(values: Mapping[str, Any], where: Where | None) -> bool:
    """Check whether an entity's field values satisfy a predicate.

    Args:
        values: Field values of the entity (``model_dump()`` output)
        where: Predicate; None or empty matches everything

    Returns:
        True if every condition holds
    """
    if not where:
        return True

    for field, expected in where.items():
        actual = values.get(field)
        if _is_operator(expected):
            operator, operand = next(iter(expected.items()))
            if operator == "inq":
                if actual not in list(operand):
                    return False
            elif actual == operand:
                return False
        elif actual != expected:
            return False
    return True

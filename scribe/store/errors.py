"""Errors raised by EntityStore backends.

Backends translate driver and validation failures into these types, so the
audit decorator and its callers see one hierarchy whatever the storage.
"""

from typing import Any


class StoreError(Exception):
    """Base for every store failure.

    ``cause`` keeps the driver or pydantic error that was translated.
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class ConnectionError(StoreError):
    """The backend could not be reached or failed mid-operation."""


class NotFoundError(StoreError):
    """No entity of ``entity_type`` has identifier ``entity_id``.

    Only lookups by identifier raise this; an empty predicate match is not an
    error.
    """

    def __init__(self, entity_type: str, entity_id: Any) -> None:
        super().__init__(f"{entity_type} {entity_id} not found")
        self.entity_type = entity_type
        self.entity_id = entity_id


class ConflictError(StoreError):
    """An identifier is already taken, in the store or within one batch."""


class ValidationError(StoreError):
    """Data does not fit the entity model, or a patch tries to change the id."""

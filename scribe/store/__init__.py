"""Entity store domain.

Contains the EntityStore interface wrapped by the audit layer:
- Entity / Count / Where models
- StoreError hierarchy
- In-memory and PostgreSQL backends
"""

from scribe.store.errors import (
    ConflictError,
    ConnectionError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from scribe.store.interface import EntityStore
from scribe.store.models import Count, DataObject, Entity, Where, matches_where

__all__ = [
    "EntityStore",
    "Entity",
    "Count",
    "DataObject",
    "Where",
    "matches_where",
    "StoreError",
    "ConnectionError",
    "NotFoundError",
    "ConflictError",
    "ValidationError",
]

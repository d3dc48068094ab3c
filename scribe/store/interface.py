"""EntityStore abstract interface."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from scribe.store.models import Count, DataObject, Entity, Where

E = TypeVar("E", bound=Entity)
ID = TypeVar("ID")


class EntityStore(ABC, Generic[E, ID]):
    """Abstract interface for create/read/update/delete entity storage.

    Entities are addressed by a unique identifier and queried with
    ``Where`` predicates. Lookups by identifier raise NotFoundError
    when the entity does not exist.
    """

    @property
    @abstractmethod
    def entity_type(self) -> type[E]:
        """Entity model managed by this store."""
        pass

    # Create operations
    @abstractmethod
    async def create(self, data: DataObject) -> E:
        """Create one entity, assigning an identifier if missing."""
        pass

    @abstractmethod
    async def create_all(self, data: list[DataObject]) -> list[E]:
        """Create several entities in one operation."""
        pass

    # Read operations
    @abstractmethod
    async def find(self, where: Where | None = None) -> list[E]:
        """Find entities matching a predicate."""
        pass

    @abstractmethod
    async def find_by_id(self, entity_id: ID) -> E:
        """Get an entity by identifier."""
        pass

    @abstractmethod
    async def count(self, where: Where | None = None) -> Count:
        """Count entities matching a predicate."""
        pass

    # Update operations
    @abstractmethod
    async def update_all(self, data: DataObject, where: Where | None = None) -> Count:
        """Apply a partial update to every entity matching a predicate."""
        pass

    @abstractmethod
    async def update_by_id(self, entity_id: ID, data: DataObject) -> None:
        """Apply a partial update to one entity."""
        pass

    @abstractmethod
    async def replace_by_id(self, entity_id: ID, data: DataObject) -> None:
        """Replace all fields of one entity, keeping its identifier."""
        pass

    # Delete operations
    @abstractmethod
    async def delete_all(self, where: Where | None = None) -> Count:
        """Delete every entity matching a predicate."""
        pass

    @abstractmethod
    async def delete_by_id(self, entity_id: ID) -> None:
        """Delete one entity."""
        pass

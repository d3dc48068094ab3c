"""In-memory implementation of EntityStore."""

from collections.abc import Callable
from typing import Any, Generic
from uuid import uuid4

from pydantic import ValidationError as PydanticValidationError

from scribe.store.errors import ConflictError, NotFoundError, ValidationError
from scribe.store.interface import ID, E, EntityStore
from scribe.store.models import Count, DataObject, Where, matches_where


class InMemoryEntityStore(EntityStore[E, ID], Generic[E, ID]):
    """In-memory implementation of EntityStore for testing and development.

    Uses simple dict storage with linear scan for queries.
    Not suitable for production use.
    """

    def __init__(
        self,
        entity_type: type[E],
        *,
        id_factory: Callable[[], Any] = uuid4,
    ) -> None:
        """Initialize empty storage.

        Args:
            entity_type: Entity model stored here
            id_factory: Produces identifiers for entities created without one
        """
        self._entity_type = entity_type
        self._id_factory = id_factory
        self._entities: dict[Any, E] = {}

    @property
    def entity_type(self) -> type[E]:
        return self._entity_type

    @property
    def _id_field(self) -> str:
        return self._entity_type.id_field

    def _build(self, payload: dict[str, Any]) -> E:
        try:
            return self._entity_type.model_validate(payload)
        except PydanticValidationError as e:
            raise ValidationError(
                f"Invalid {self._entity_type.__name__} data: {e}", cause=e
            ) from e

    def _prepare(self, data: DataObject) -> E:
        payload = dict(data)
        if payload.get(self._id_field) is None:
            payload[self._id_field] = self._id_factory()
        entity = self._build(payload)
        if entity.get_id() in self._entities:
            raise ConflictError(
                f"{self._entity_type.__name__} {entity.get_id()} already exists"
            )
        return entity

    def _get(self, entity_id: ID) -> E:
        entity = self._entities.get(entity_id)
        if entity is None:
            raise NotFoundError(self._entity_type.__name__, entity_id)
        return entity

    def _patched(self, entity: E, data: DataObject) -> E:
        if self._id_field in data and data[self._id_field] != entity.get_id():
            raise ValidationError("Entity identifier cannot be changed")
        return self._build({**entity.model_dump(), **data})

    def _matching(self, where: Where | None) -> list[E]:
        return [
            entity
            for entity in self._entities.values()
            if matches_where(entity.model_dump(), where)
        ]

    async def create(self, data: DataObject) -> E:
        """Create one entity."""
        entity = self._prepare(data)
        self._entities[entity.get_id()] = entity
        return entity

    async def create_all(self, data: list[DataObject]) -> list[E]:
        """Create several entities; nothing is stored if any of them is invalid."""
        created: list[E] = []
        seen: set[Any] = set()
        for item in data:
            entity = self._prepare(item)
            if entity.get_id() in seen:
                raise ConflictError(
                    f"{self._entity_type.__name__} {entity.get_id()} duplicated in batch"
                )
            seen.add(entity.get_id())
            created.append(entity)
        for entity in created:
            self._entities[entity.get_id()] = entity
        return created

    async def find(self, where: Where | None = None) -> list[E]:
        """Find entities matching a predicate, in insertion order."""
        return self._matching(where)

    async def find_by_id(self, entity_id: ID) -> E:
        """Get an entity by identifier."""
        return self._get(entity_id)

    async def count(self, where: Where | None = None) -> Count:
        """Count entities matching a predicate."""
        return Count(count=len(self._matching(where)))

    async def update_all(self, data: DataObject, where: Where | None = None) -> Count:
        """Patch every matching entity; all-or-nothing on validation errors."""
        updated = [self._patched(entity, data) for entity in self._matching(where)]
        for entity in updated:
            self._entities[entity.get_id()] = entity
        return Count(count=len(updated))

    async def update_by_id(self, entity_id: ID, data: DataObject) -> None:
        """Patch one entity."""
        entity = self._patched(self._get(entity_id), data)
        self._entities[entity_id] = entity

    async def replace_by_id(self, entity_id: ID, data: DataObject) -> None:
        """Replace one entity's fields."""
        self._get(entity_id)
        if self._id_field in data and data[self._id_field] != entity_id:
            raise ValidationError("Entity identifier cannot be changed")
        self._entities[entity_id] = self._build({**data, self._id_field: entity_id})

    async def delete_all(self, where: Where | None = None) -> Count:
        """Delete every matching entity."""
        doomed = [entity.get_id() for entity in self._matching(where)]
        for entity_id in doomed:
            del self._entities[entity_id]
        return Count(count=len(doomed))

    async def delete_by_id(self, entity_id: ID) -> None:
        """Delete one entity."""
        self._get(entity_id)
        del self._entities[entity_id]

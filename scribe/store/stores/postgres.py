"""PostgreSQL implementation of EntityStore.

Entities are kept as JSONB documents in a shared table, partitioned by
entity type name. Uses asyncpg for async database access.
"""

import json
from collections.abc import Callable
from typing import Any, Generic
from uuid import uuid4

import asyncpg
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import to_jsonable_python

from scribe.db.pool import PostgresPool
from scribe.observability.logging import get_logger
from scribe.store.errors import (
    ConflictError,
    ConnectionError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from scribe.store.interface import ID, E, EntityStore
from scribe.store.models import Count, DataObject, Where

logger = get_logger(__name__)


def compile_where(where: Where | None, start: int = 1) -> tuple[str, list[Any]]:
    """Compile a predicate into a SQL condition over the ``data`` column.

    Field names and values are both bound as parameters.

    Args:
        where: Predicate to compile
        start: Index of the first positional parameter

    Returns:
        Tuple of (condition, params); condition is "TRUE" for no predicate
    """
    if not where:
        return "TRUE", []

    clauses: list[str] = []
    params: list[Any] = []
    for field, expected in where.items():
        params.append(field)
        field_ref = f"data -> ${start + len(params) - 1}"
        if isinstance(expected, dict) and list(expected) == ["inq"]:
            params.append([json.dumps(to_jsonable_python(v)) for v in expected["inq"]])
            clauses.append(f"{field_ref} = ANY(${start + len(params) - 1}::jsonb[])")
        elif isinstance(expected, dict) and list(expected) == ["neq"]:
            params.append(json.dumps(to_jsonable_python(expected["neq"])))
            clauses.append(
                f"{field_ref} IS DISTINCT FROM ${start + len(params) - 1}::jsonb"
            )
        else:
            params.append(json.dumps(to_jsonable_python(expected)))
            clauses.append(f"{field_ref} = ${start + len(params) - 1}::jsonb")
    return " AND ".join(clauses), params


class PostgresEntityStore(EntityStore[E, ID], Generic[E, ID]):
    """PostgreSQL implementation of EntityStore.

    Uses asyncpg connection pool for efficient database access.
    Entities created without an identifier get one from ``id_factory``,
    uuid4 by default.
    """

    def __init__(
        self,
        pool: PostgresPool,
        entity_type: type[E],
        *,
        id_factory: Callable[[], Any] = uuid4,
        table: str = "entities",
    ) -> None:
        """Initialize with connection pool.

        Args:
            pool: PostgreSQL connection pool
            entity_type: Entity model stored here
            id_factory: Produces identifiers for entities created without one
            table: Document table name
        """
        self._pool = pool
        self._entity_type = entity_type
        self._id_factory = id_factory
        self._table = table

    @property
    def entity_type(self) -> type[E]:
        return self._entity_type

    @property
    def _type_name(self) -> str:
        return self._entity_type.__name__

    def _build(self, payload: dict[str, Any]) -> E:
        try:
            return self._entity_type.model_validate(payload)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid {self._type_name} data: {e}", cause=e) from e

    def _prepare(self, data: DataObject) -> E:
        payload = dict(data)
        id_field = self._entity_type.id_field
        if payload.get(id_field) is None:
            payload[id_field] = self._id_factory()
        return self._build(payload)

    def _row_to_entity(self, row: Any) -> E:
        data = row["data"]
        if isinstance(data, str):
            data = json.loads(data)
        return self._build(data)

    async def create(self, data: DataObject) -> E:
        """Create one entity."""
        created = await self.create_all([data])
        return created[0]

    async def create_all(self, data: list[DataObject]) -> list[E]:
        """Create several entities in one transaction."""
        entities = [self._prepare(item) for item in data]
        try:
            async with self._pool.acquire() as conn:
                try:
                    async with conn.transaction():
                        await conn.executemany(
                            f"""
                            INSERT INTO {self._table} (entity_type, id, data)
                            VALUES ($1, $2, $3::jsonb)
                            """,
                            [
                                (
                                    self._type_name,
                                    str(entity.get_id()),
                                    json.dumps(entity.to_snapshot()),
                                )
                                for entity in entities
                            ],
                        )
                except asyncpg.UniqueViolationError as e:
                    raise ConflictError(
                        f"{self._type_name} already exists: {e}", cause=e
                    ) from e
            logger.debug(
                "entities_created", entity_type=self._type_name, count=len(entities)
            )
            return entities
        except StoreError:
            raise
        except Exception as e:
            logger.error(
                "postgres_create_entities_error",
                entity_type=self._type_name,
                error=str(e),
            )
            raise ConnectionError(f"Failed to create entities: {e}", cause=e) from e

    async def find(self, where: Where | None = None) -> list[E]:
        """Find entities matching a predicate, oldest first."""
        condition, params = compile_where(where, start=2)
        try:
            async with self._pool.acquire() as conn:
                rows = await conn.fetch(
                    f"""
                    SELECT data FROM {self._table}
                    WHERE entity_type = $1 AND {condition}
                    ORDER BY created_at ASC, id ASC
                    """,
                    self._type_name,
                    *params,
                )
                return [self._row_to_entity(row) for row in rows]
        except StoreError:
            raise
        except Exception as e:
            logger.error(
                "postgres_find_entities_error", entity_type=self._type_name, error=str(e)
            )
            raise ConnectionError(f"Failed to find entities: {e}", cause=e) from e

    async def find_by_id(self, entity_id: ID) -> E:
        """Get an entity by identifier."""
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"SELECT data FROM {self._table} WHERE entity_type = $1 AND id = $2",
                    self._type_name,
                    str(entity_id),
                )
        except Exception as e:
            logger.error(
                "postgres_find_entity_error",
                entity_type=self._type_name,
                entity_id=str(entity_id),
                error=str(e),
            )
            raise ConnectionError(f"Failed to get entity: {e}", cause=e) from e
        if row is None:
            raise NotFoundError(self._type_name, entity_id)
        return self._row_to_entity(row)

    async def count(self, where: Where | None = None) -> Count:
        """Count entities matching a predicate."""
        condition, params = compile_where(where, start=2)
        try:
            async with self._pool.acquire() as conn:
                total = await conn.fetchval(
                    f"""
                    SELECT COUNT(*) FROM {self._table}
                    WHERE entity_type = $1 AND {condition}
                    """,
                    self._type_name,
                    *params,
                )
                return Count(count=total)
        except Exception as e:
            logger.error(
                "postgres_count_entities_error", entity_type=self._type_name, error=str(e)
            )
            raise ConnectionError(f"Failed to count entities: {e}", cause=e) from e

    async def _write(self, conn: Any, entity: E) -> None:
        await conn.execute(
            f"""
            UPDATE {self._table}
            SET data = $3::jsonb, updated_at = NOW()
            WHERE entity_type = $1 AND id = $2
            """,
            self._type_name,
            str(entity.get_id()),
            json.dumps(entity.to_snapshot()),
        )

    def _patched(self, entity: E, data: DataObject) -> E:
        id_field = self._entity_type.id_field
        if id_field in data and data[id_field] != entity.get_id():
            raise ValidationError("Entity identifier cannot be changed")
        return self._build({**entity.model_dump(), **data})

    async def update_all(self, data: DataObject, where: Where | None = None) -> Count:
        """Patch every matching entity in one transaction."""
        condition, params = compile_where(where, start=2)
        try:
            async with self._pool.acquire() as conn:
                async with conn.transaction():
                    rows = await conn.fetch(
                        f"""
                        SELECT data FROM {self._table}
                        WHERE entity_type = $1 AND {condition}
                        FOR UPDATE
                        """,
                        self._type_name,
                        *params,
                    )
                    updated = [
                        self._patched(self._row_to_entity(row), data) for row in rows
                    ]
                    for entity in updated:
                        await self._write(conn, entity)
            return Count(count=len(updated))
        except StoreError:
            raise
        except Exception as e:
            logger.error(
                "postgres_update_entities_error", entity_type=self._type_name, error=str(e)
            )
            raise ConnectionError(f"Failed to update entities: {e}", cause=e) from e

    async def _rewrite_by_id(self, entity_id: ID, build: Any) -> None:
        try:
            async with self._pool.acquire() as conn:
                async with conn.transaction():
                    row = await conn.fetchrow(
                        f"""
                        SELECT data FROM {self._table}
                        WHERE entity_type = $1 AND id = $2
                        FOR UPDATE
                        """,
                        self._type_name,
                        str(entity_id),
                    )
                    if row is None:
                        raise NotFoundError(self._type_name, entity_id)
                    await self._write(conn, build(self._row_to_entity(row)))
        except StoreError:
            raise
        except Exception as e:
            logger.error(
                "postgres_update_entity_error",
                entity_type=self._type_name,
                entity_id=str(entity_id),
                error=str(e),
            )
            raise ConnectionError(f"Failed to update entity: {e}", cause=e) from e

    async def update_by_id(self, entity_id: ID, data: DataObject) -> None:
        """Patch one entity."""
        await self._rewrite_by_id(entity_id, lambda entity: self._patched(entity, data))

    async def replace_by_id(self, entity_id: ID, data: DataObject) -> None:
        """Replace one entity's fields."""
        id_field = self._entity_type.id_field

        def replace(entity: E) -> E:
            if id_field in data and data[id_field] != entity.get_id():
                raise ValidationError("Entity identifier cannot be changed")
            return self._build({**data, id_field: entity.get_id()})

        await self._rewrite_by_id(entity_id, replace)

    async def delete_all(self, where: Where | None = None) -> Count:
        """Delete every matching entity."""
        condition, params = compile_where(where, start=2)
        try:
            async with self._pool.acquire() as conn:
                rows = await conn.fetch(
                    f"""
                    DELETE FROM {self._table}
                    WHERE entity_type = $1 AND {condition}
                    RETURNING id
                    """,
                    self._type_name,
                    *params,
                )
                return Count(count=len(rows))
        except Exception as e:
            logger.error(
                "postgres_delete_entities_error", entity_type=self._type_name, error=str(e)
            )
            raise ConnectionError(f"Failed to delete entities: {e}", cause=e) from e

    async def delete_by_id(self, entity_id: ID) -> None:
        """Delete one entity."""
        try:
            async with self._pool.acquire() as conn:
                deleted = await conn.fetchval(
                    f"""
                    DELETE FROM {self._table}
                    WHERE entity_type = $1 AND id = $2
                    RETURNING id
                    """,
                    self._type_name,
                    str(entity_id),
                )
        except Exception as e:
            logger.error(
                "postgres_delete_entity_error",
                entity_type=self._type_name,
                entity_id=str(entity_id),
                error=str(e),
            )
            raise ConnectionError(f"Failed to delete entity: {e}", cause=e) from e
        if deleted is None:
            raise NotFoundError(self._type_name, entity_id)

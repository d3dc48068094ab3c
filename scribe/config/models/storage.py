"""Storage backend configuration models."""

from typing import Literal

from pydantic import BaseModel, Field

BackendType = Literal["inmemory", "postgres"]


class PostgresConfig(BaseModel):
    """PostgreSQL connection pool configuration.

    Note: the DSN should come from SCRIBE_DATABASE_URL or DATABASE_URL,
    not from config files.
    """

    connection_url: str | None = Field(
        default=None,
        description="Connection URL (from env var)",
    )
    min_pool_size: int = Field(
        default=2,
        gt=0,
        description="Minimum connections to keep open",
    )
    max_pool_size: int = Field(
        default=10,
        gt=0,
        description="Maximum connections in pool",
    )
    command_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Default timeout for queries (seconds)",
    )


class StorageConfig(BaseModel):
    """Configuration for storage backends."""

    entities: BackendType = Field(
        default="postgres",
        description="EntityStore backend",
    )
    entities_table: str = Field(
        default="entities",
        pattern=r"^[a-z_][a-z0-9_]*$",
        description="Document table used by the Postgres entity store",
    )
    postgres: PostgresConfig = Field(
        default_factory=PostgresConfig,
        description="Shared PostgreSQL pool settings",
    )

"""PostgreSQL connectivity shared by the Postgres store and audit sink."""

from scribe.db.pool import PostgresPool

__all__ = ["PostgresPool"]

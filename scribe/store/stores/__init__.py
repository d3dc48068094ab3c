"""Entity store backends."""

from scribe.store.stores.inmemory import InMemoryEntityStore
from scribe.store.stores.postgres import PostgresEntityStore

__all__ = [
    "InMemoryEntityStore",
    "PostgresEntityStore",
]

"""Entity stores: the repository interface and its implementations."""

from tradedoc_kernel.store.base import EntityStore, RecordKind
from tradedoc_kernel.store.memory import InMemoryEntityStore
from tradedoc_kernel.store.sql import SqlEntityStore

__all__ = [
    "EntityStore",
    "RecordKind",
    "InMemoryEntityStore",
    "SqlEntityStore",
]

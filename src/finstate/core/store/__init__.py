"""
Entity stores for finstate.

The reconciler reads transactions and reads/writes holdings through the
async ``EntityStore`` interface; in-memory and JSON-file backends ship here.
"""

from .base import (
    HOLDINGS,
    TRANSACTIONS,
    EntityNotFoundError,
    EntityStore,
    StoreError,
    UnknownCollectionError,
)
from .local import JsonFileEntityStore
from .memory import InMemoryEntityStore, sort_records

__all__ = [
    "HOLDINGS",
    "TRANSACTIONS",
    "EntityNotFoundError",
    "EntityStore",
    "InMemoryEntityStore",
    "JsonFileEntityStore",
    "StoreError",
    "UnknownCollectionError",
    "sort_records",
]

"""
Abstract base class for entity stores.

The engine never owns persistence; it talks to whatever entity store the
application provides through this async interface. Records are plain dicts
carrying an ``id`` field, grouped into named collections.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from finstate.core.exceptions import FinStateError
from finstate.core.types import Record

TRANSACTIONS = "transactions"
HOLDINGS = "holdings"


class EntityStore(ABC):
    """Abstract base class for entity stores."""

    def __init__(self, **config):
        self.config = config

    @abstractmethod
    async def list(self, collection: str, sort: str | None = None) -> list[Record]:
        """Return every record in *collection*.

        ``sort`` is a field name, optionally prefixed with ``-`` for
        descending order (e.g. ``"-date"``).
        """

    @abstractmethod
    async def filter(self, collection: str, **fields: Any) -> list[Record]:
        """Return records whose fields equal every given value."""

    @abstractmethod
    async def get(self, collection: str, record_id: str) -> Record:
        """Return one record. Raises EntityNotFoundError if missing."""

    @abstractmethod
    async def create(self, collection: str, record: Record) -> Record:
        """Insert a record, assigning an ``id`` when absent."""

    @abstractmethod
    async def update(self, collection: str, record_id: str, patch: Record) -> Record:
        """Merge *patch* into an existing record and return the result."""

    @abstractmethod
    async def delete(self, collection: str, record_id: str) -> bool:
        """Delete a record. Returns True if deleted, False if it didn't exist."""


class StoreError(FinStateError):
    """Base exception for entity store errors."""


class EntityNotFoundError(StoreError, KeyError):
    """Raised when a record id doesn't exist in a collection."""


class UnknownCollectionError(StoreError):
    """Raised when a collection name is not served by the store."""

"""
In-memory entity store.

Backs tests and embedded use. Records are copied on the way in and out so
that callers can only change stored state through ``update``.
"""

from __future__ import annotations

import copy
import uuid
from typing import Any

from finstate.core.types import Record

from .base import HOLDINGS, TRANSACTIONS, EntityNotFoundError, EntityStore, UnknownCollectionError


def _sort_key(field: str):
    def key(record: Record) -> tuple[bool, Any]:
        value = record.get(field)
        return (value is None, "" if value is None else value)

    return key


def sort_records(records: list[Record], sort: str | None) -> list[Record]:
    """Apply a ``"field"`` / ``"-field"`` sort spec. Missing values sort last."""
    if not sort:
        return records
    descending = sort.startswith("-")
    field = sort.lstrip("-")
    present = [r for r in records if r.get(field) is not None]
    missing = [r for r in records if r.get(field) is None]
    present.sort(key=_sort_key(field), reverse=descending)
    return present + missing


class InMemoryEntityStore(EntityStore):
    """Dict-backed store serving a fixed set of collections."""

    def __init__(
        self,
        data: dict[str, list[Record]] | None = None,
        collections: tuple[str, ...] = (TRANSACTIONS, HOLDINGS),
        **config,
    ):
        super().__init__(**config)
        self._collections: dict[str, dict[str, Record]] = {name: {} for name in collections}
        for name, records in (data or {}).items():
            table = self._table(name)
            for record in records:
                stored = self._with_id(record)
                table[stored["id"]] = stored

    @staticmethod
    def _with_id(record: Record) -> Record:
        stored = copy.deepcopy(record)
        if not stored.get("id"):
            stored["id"] = uuid.uuid4().hex
        stored["id"] = str(stored["id"])
        return stored

    def _table(self, collection: str) -> dict[str, Record]:
        try:
            return self._collections[collection]
        except KeyError:
            raise UnknownCollectionError(f"Unknown collection: {collection}") from None

    def snapshot(self) -> dict[str, list[Record]]:
        """Deep copy of every collection, in insertion order."""
        return {name: [copy.deepcopy(r) for r in table.values()] for name, table in self._collections.items()}

    async def list(self, collection: str, sort: str | None = None) -> list[Record]:
        records = [copy.deepcopy(r) for r in self._table(collection).values()]
        return sort_records(records, sort)

    async def filter(self, collection: str, **fields: Any) -> list[Record]:
        return [
            copy.deepcopy(r)
            for r in self._table(collection).values()
            if all(r.get(name) == value for name, value in fields.items())
        ]

    async def get(self, collection: str, record_id: str) -> Record:
        table = self._table(collection)
        if record_id not in table:
            raise EntityNotFoundError(f"{collection}/{record_id} not found")
        return copy.deepcopy(table[record_id])

    async def create(self, collection: str, record: Record) -> Record:
        table = self._table(collection)
        stored = self._with_id(record)
        table[stored["id"]] = stored
        return copy.deepcopy(stored)

    async def update(self, collection: str, record_id: str, patch: Record) -> Record:
        table = self._table(collection)
        if record_id not in table:
            raise EntityNotFoundError(f"{collection}/{record_id} not found")
        changes = {k: copy.deepcopy(v) for k, v in patch.items() if k != "id"}
        table[record_id].update(changes)
        return copy.deepcopy(table[record_id])

    async def delete(self, collection: str, record_id: str) -> bool:
        return self._table(collection).pop(record_id, None) is not None

"""
JSON file entity store.

Keeps every collection in a single JSON document on disk, loaded lazily and
rewritten after each mutation. Suitable for the CLI and single-user setups.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import aiofiles
from loguru import logger

from finstate.core.types import PathLike, Record

from .base import HOLDINGS, TRANSACTIONS, StoreError
from .memory import InMemoryEntityStore


class JsonFileEntityStore(InMemoryEntityStore):
    """File-backed store: ``{"transactions": [...], "holdings": [...]}``."""

    def __init__(
        self,
        path: PathLike,
        collections: tuple[str, ...] = (TRANSACTIONS, HOLDINGS),
        **config,
    ):
        super().__init__(collections=collections, **config)
        self.path = Path(path).expanduser()
        self._loaded = False
        self._write_lock = asyncio.Lock()

    async def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        if self.path.exists():
            try:
                async with aiofiles.open(self.path) as f:
                    raw = await f.read()
                data = json.loads(raw) if raw.strip() else {}
            except json.JSONDecodeError as e:
                raise StoreError(f"Store file {self.path} is not valid JSON: {e}") from e
            if not isinstance(data, dict):
                raise StoreError(f"Store file {self.path} must contain an object of collections")
            for name, records in data.items():
                if name not in self._collections:
                    logger.warning(f"Ignoring unknown collection '{name}' in {self.path}")
                    continue
                table = self._collections[name]
                for record in records:
                    stored = self._with_id(record)
                    table[stored["id"]] = stored
        self._loaded = True

    async def _flush(self) -> None:
        async with self._write_lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            payload = json.dumps(self.snapshot(), indent=2, sort_keys=True, default=str)
            async with aiofiles.open(self.path, "w") as f:
                await f.write(payload)

    async def list(self, collection: str, sort: str | None = None) -> list[Record]:
        await self._ensure_loaded()
        return await super().list(collection, sort)

    async def filter(self, collection: str, **fields: Any) -> list[Record]:
        await self._ensure_loaded()
        return await super().filter(collection, **fields)

    async def get(self, collection: str, record_id: str) -> Record:
        await self._ensure_loaded()
        return await super().get(collection, record_id)

    async def create(self, collection: str, record: Record) -> Record:
        await self._ensure_loaded()
        created = await super().create(collection, record)
        await self._flush()
        return created

    async def update(self, collection: str, record_id: str, patch: Record) -> Record:
        await self._ensure_loaded()
        updated = await super().update(collection, record_id, patch)
        await self._flush()
        return updated

    async def delete(self, collection: str, record_id: str) -> bool:
        await self._ensure_loaded()
        deleted = await super().delete(collection, record_id)
        if deleted:
            await self._flush()
        return deleted

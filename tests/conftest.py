"""Shared test fixtures for finstate."""

import os
import tempfile

import pytest
from loguru import logger

from finstate.core.store import InMemoryEntityStore


class CountingStore(InMemoryEntityStore):
    """In-memory store that records every update call."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.updates: list[tuple[str, str, dict]] = []

    async def update(self, collection, record_id, patch):
        self.updates.append((collection, record_id, dict(patch)))
        return await super().update(collection, record_id, patch)


def _make_lot(lot_id, ticker="BTC", account_id="acct-1", quantity=1.0, cost_basis=100.0, remaining=None, **extra):
    record = {
        "id": lot_id,
        "type": "buy",
        "asset_ticker": ticker,
        "account_id": account_id,
        "quantity": quantity,
        "price_per_unit": cost_basis / quantity if quantity else 0,
        "cost_basis": cost_basis,
        "date": "2024-01-01",
    }
    if remaining is not None:
        record["remaining_quantity"] = remaining
    record.update(extra)
    return record


def _make_holding(holding_id, ticker="BTC", account_id="acct-1", quantity=0.0, cost_basis_total=0.0):
    return {
        "id": holding_id,
        "ticker": ticker,
        "account_id": account_id,
        "quantity": quantity,
        "cost_basis_total": cost_basis_total,
    }


@pytest.fixture
def tmp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as d:
        yield d


@pytest.fixture
def tmp_config_file(tmp_dir):
    """Create a temporary YAML config file."""
    import yaml

    config_data = {
        "paths": {"data_dir": os.path.join(tmp_dir, "data")},
        "projection": {"horizon_years": 5, "default_inflation_rate": 2.5},
        "ledger": {"quantity_tolerance": 1e-6},
    }
    config_path = os.path.join(tmp_dir, "config.yaml")
    with open(config_path, "w") as f:
        yaml.dump(config_data, f)
    return config_path


@pytest.fixture
def log_messages():
    """Capture loguru output as (level, message) tuples."""
    messages: list[tuple[str, str]] = []
    handler_id = logger.add(lambda m: messages.append((m.record["level"].name, m.record["message"])), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def make_lot():
    """Factory for buy-lot transaction records."""
    return _make_lot


@pytest.fixture
def make_holding():
    """Factory for holding records."""
    return _make_holding


@pytest.fixture
def counting_store():
    """Factory for an in-memory store that records update calls."""

    def _factory(transactions=(), holdings=()):
        return CountingStore({"transactions": list(transactions), "holdings": list(holdings)})

    return _factory

"""Read-only view over the transaction ledger.

Buy transactions are cost-basis lots and the single source of truth for
holdings. The view never writes; it is rebuilt from the store whenever a
fresh read is needed.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Iterable
from typing import Any

from finstate.core.store import TRANSACTIONS, EntityStore
from finstate.core.types import AccountKey, Record
from finstate.financial.models import Lot, normalize_account_id


def ledger_version(lots: Iterable[Lot]) -> str:
    """Stable fingerprint of the lot fields a holding is derived from.

    Independent of lot order, so re-listing the same ledger gives the same
    version.
    """
    rows = sorted(
        [lot.id, lot.quantity, lot.remaining, lot.cost_basis] for lot in lots
    )
    digest = hashlib.sha256(json.dumps(rows, separators=(",", ":")).encode())
    return digest.hexdigest()[:16]


class LotLedger:
    """Transactions grouped by (ticker, account).

    Args:
        transactions: Lots as models or raw store records, in store order.
    """

    def __init__(self, transactions: Iterable[Lot | Record]):
        self.transactions: list[Lot] = [
            tx if isinstance(tx, Lot) else Lot.from_record(tx) for tx in transactions
        ]

    @classmethod
    async def load(cls, store: EntityStore, sort: str | None = None) -> LotLedger:
        """Read every transaction from *store*. Store errors propagate."""
        return cls(await store.list(TRANSACTIONS, sort=sort))

    def __len__(self) -> int:
        return len(self.transactions)

    def lots_for(self, ticker: str, account_id: Any) -> list[Lot]:
        """Buy lots for *ticker* in *account_id*; None and "" both mean unassigned."""
        account = normalize_account_id(account_id)
        return [
            lot
            for lot in self.transactions
            if lot.is_buy and lot.asset_ticker == ticker and lot.account_id == account
        ]

    def available_quantity(self, ticker: str, account_id: Any) -> float:
        """Unconsumed quantity across the pair's lots."""
        return sum(lot.remaining for lot in self.lots_for(ticker, account_id))

    def weighted_average_cost(self, ticker: str, account_id: Any) -> float:
        """Per-unit cost averaged over remaining quantity; 0 with nothing left."""
        total_qty = 0.0
        total_cost = 0.0
        for lot in self.lots_for(ticker, account_id):
            total_qty += lot.remaining
            total_cost += lot.remaining * lot.cost_per_unit
        return total_cost / total_qty if total_qty > 0 else 0.0

    def tickers_for_account(self, account_id: Any) -> list[str]:
        """Distinct tickers traded in *account_id*, first-seen order."""
        account = normalize_account_id(account_id)
        tickers: dict[str, None] = {}
        for tx in self.transactions:
            if tx.account_id == account and tx.asset_ticker:
                tickers.setdefault(tx.asset_ticker, None)
        return list(tickers)

    def pairs(self) -> list[AccountKey]:
        """Distinct (ticker, account) pairs across every transaction."""
        seen: dict[AccountKey, None] = {}
        for tx in self.transactions:
            if tx.asset_ticker:
                seen.setdefault((tx.asset_ticker, tx.account_id), None)
        return list(seen)

    def version_for(self, ticker: str, account_id: Any) -> str:
        return ledger_version(self.lots_for(ticker, account_id))

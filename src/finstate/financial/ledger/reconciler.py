"""Holdings reconciliation.

Holdings are a materialized view of the lot ledger: for every
(ticker, account) pair,

    quantity         = sum of remaining lot quantity
    cost_basis_total = sum of lot cost basis scaled by remaining / original

The reconciler recomputes that target from the ledger and writes the stored
holding only when it has drifted. Every ledger mutation (buy, sell, import,
edit, delete) should call ``reconcile`` for the pairs it touched.

Creating a holding is the buy path's job. When lots exist but no holding
does, the gap is reported as MISSING_HOLDING and nothing is written.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from loguru import logger

from finstate.core.config import Config
from finstate.core.exceptions import ReconciliationError
from finstate.core.store import HOLDINGS, EntityStore
from finstate.core.types import AccountKey, Record
from finstate.financial.models import QUANTITY_EPSILON, Holding, normalize_account_id

from .lots import LotLedger, ledger_version

DEFAULT_COST_BASIS_TOLERANCE = 0.01


class ReconcileStatus(Enum):
    """Outcome of reconciling one (ticker, account) pair."""

    UPDATED = "updated"  # Holding rewritten to the ledger-derived values
    ZEROED = "zeroed"  # Lots exhausted; holding set to 0 / 0
    CONVERGED = "converged"  # Holding already matched; no write
    MISSING_HOLDING = "missing_holding"  # Lots exist but no holding record
    NO_LOTS = "no_lots"  # No remaining lots and no holding to zero


@dataclass(frozen=True)
class ReconcileResult:
    """What a single-pair reconciliation found and did."""

    ticker: str
    account_id: str | None
    status: ReconcileStatus
    quantity: float
    cost_basis: float
    ledger_version: str
    previous_quantity: float | None = None
    holding_id: str | None = None

    @property
    def wrote(self) -> bool:
        return self.status in (ReconcileStatus.UPDATED, ReconcileStatus.ZEROED)


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class HoldingsReconciler:
    """Derives holdings from lots and writes back the difference.

    Calls for the same (ticker, account) key are serialized with a per-key
    ``asyncio.Lock``; different keys run independently. Batch variants
    reconcile one pair at a time, so a store failure leaves earlier pairs
    corrected and later pairs untouched.

    Args:
        store: Entity store serving ``transactions`` and ``holdings``.
        quantity_tolerance: Quantities closer than this are equal; below it
            a quantity is zero.
        cost_basis_tolerance: Money differences below this are equal.
        clock: Returns the ``reconciled_at`` timestamp for writes.
    """

    def __init__(
        self,
        store: EntityStore,
        quantity_tolerance: float = QUANTITY_EPSILON,
        cost_basis_tolerance: float = DEFAULT_COST_BASIS_TOLERANCE,
        clock: Callable[[], str] = _utc_now,
    ):
        self.store = store
        self.quantity_tolerance = quantity_tolerance
        self.cost_basis_tolerance = cost_basis_tolerance
        self._clock = clock
        self._locks: dict[AccountKey, asyncio.Lock] = {}
        self._lock_users: dict[AccountKey, int] = {}

    @classmethod
    def from_config(cls, store: EntityStore, config: Config) -> HoldingsReconciler:
        ledger = config.validated().ledger
        return cls(
            store,
            quantity_tolerance=ledger.quantity_tolerance,
            cost_basis_tolerance=ledger.cost_basis_tolerance,
        )

    @asynccontextmanager
    async def _locked(self, key: AccountKey) -> AsyncIterator[None]:
        """Hold the key's lock; the lock is dropped once no caller holds or awaits it."""
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._lock_users[key] = self._lock_users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[key] -= 1
            if not self._lock_users[key]:
                del self._lock_users[key]
                del self._locks[key]

    async def _find_holding(self, ticker: str, account_id: str | None) -> Record | None:
        matches = [
            record
            for record in await self.store.filter(HOLDINGS, ticker=ticker)
            if normalize_account_id(record.get("account_id")) == account_id
        ]
        if len(matches) > 1:
            logger.warning(
                f"{len(matches)} holdings for {ticker} in account {account_id or 'unassigned'}; "
                f"reconciling {matches[0].get('id')}"
            )
        return matches[0] if matches else None

    # -- Single pair ---------------------------------------------------------

    async def reconcile(self, ticker: str, account_id: Any = None) -> float:
        """Reconcile one pair and return the ledger-derived quantity."""
        result = await self.reconcile_pair(ticker, account_id)
        return result.quantity

    async def reconcile_pair(self, ticker: str, account_id: Any = None) -> ReconcileResult:
        """Reconcile one (ticker, account) pair.

        Raises:
            ReconciliationError: if *ticker* is empty.
            StoreError: or anything else the store raises, unchanged.
        """
        if not ticker:
            raise ReconciliationError("reconcile requires a ticker")
        account = normalize_account_id(account_id)

        async with self._locked((ticker, account)):
            return await self._reconcile_locked(ticker, account)

    async def _reconcile_locked(self, ticker: str, account: str | None) -> ReconcileResult:
        ledger = await LotLedger.load(self.store)
        lots = ledger.lots_for(ticker, account)
        target_quantity = sum(lot.remaining for lot in lots)
        target_cost_basis = sum(lot.remaining_cost_basis for lot in lots)
        version = ledger_version(lots)

        record = await self._find_holding(ticker, account)
        holding = Holding.from_record(record) if record is not None else None
        label = f"{ticker} ({account or 'unassigned'})"

        def result(status: ReconcileStatus, quantity: float, cost_basis: float) -> ReconcileResult:
            return ReconcileResult(
                ticker=ticker,
                account_id=account,
                status=status,
                quantity=quantity,
                cost_basis=cost_basis,
                ledger_version=version,
                previous_quantity=holding.quantity if holding else None,
                holding_id=holding.id if holding else None,
            )

        if target_quantity > self.quantity_tolerance:
            if holding is None:
                logger.warning(
                    f"Holding missing for {label}: lots hold {target_quantity} but no holding record exists"
                )
                return result(ReconcileStatus.MISSING_HOLDING, target_quantity, target_cost_basis)

            drift_quantity = abs(target_quantity - holding.quantity)
            drift_cost = abs(target_cost_basis - holding.cost_basis_total)
            if drift_quantity <= self.quantity_tolerance and drift_cost <= self.cost_basis_tolerance:
                logger.debug(f"Holding {label} already matches ledger: qty={holding.quantity}")
                return result(ReconcileStatus.CONVERGED, target_quantity, target_cost_basis)

            await self.store.update(
                HOLDINGS,
                holding.id,
                {
                    "quantity": target_quantity,
                    "cost_basis_total": target_cost_basis,
                    "ledger_version": version,
                    "reconciled_at": self._clock(),
                },
            )
            logger.info(
                f"Updated holding {label}: qty {holding.quantity} -> {target_quantity}, "
                f"basis {holding.cost_basis_total:.2f} -> {target_cost_basis:.2f}"
            )
            return result(ReconcileStatus.UPDATED, target_quantity, target_cost_basis)

        if holding is not None and (holding.quantity != 0 or holding.cost_basis_total != 0):
            await self.store.update(
                HOLDINGS,
                holding.id,
                {
                    "quantity": 0,
                    "cost_basis_total": 0,
                    "ledger_version": version,
                    "reconciled_at": self._clock(),
                },
            )
            logger.info(f"Zeroed holding {label}: no remaining lots (was qty {holding.quantity})")
            return result(ReconcileStatus.ZEROED, 0.0, 0.0)

        if holding is not None:
            logger.debug(f"Holding {label} already zero")
            return result(ReconcileStatus.CONVERGED, 0.0, 0.0)
        logger.debug(f"No lots or holding for {label}")
        return result(ReconcileStatus.NO_LOTS, 0.0, 0.0)

    # -- Batches -------------------------------------------------------------

    async def reconcile_account(self, account_id: Any = None) -> list[ReconcileResult]:
        """Reconcile every ticker traded in one account (None = unassigned)."""
        ledger = await LotLedger.load(self.store, sort="-date")
        tickers = ledger.tickers_for_account(account_id)
        logger.info(f"Reconciling {len(tickers)} tickers in account {normalize_account_id(account_id) or 'unassigned'}")

        results = []
        for ticker in tickers:
            results.append(await self.reconcile_pair(ticker, account_id))
        return results

    async def reconcile_all(self) -> list[ReconcileResult]:
        """Reconcile every pair seen in transactions or existing holdings.

        Holding-only pairs are included so a holding whose lots were all
        deleted still gets zeroed.
        """
        ledger = await LotLedger.load(self.store)
        pairs: dict[AccountKey, None] = dict.fromkeys(ledger.pairs())
        for record in await self.store.list(HOLDINGS):
            holding = Holding.from_record(record)
            if holding.ticker:
                pairs.setdefault((holding.ticker, holding.account_id), None)
        logger.info(f"Reconciling {len(pairs)} holdings across all accounts")

        results = []
        for ticker, account in pairs:
            results.append(await self.reconcile_pair(ticker, account))
        return results

    # -- Staleness -----------------------------------------------------------

    async def ledger_version_for(self, ticker: str, account_id: Any = None) -> str:
        """Current ledger fingerprint for the pair."""
        ledger = await LotLedger.load(self.store)
        return ledger.version_for(ticker, account_id)

    async def is_stale(self, holding: Holding | Record) -> bool:
        """True when the holding was not last derived from the current ledger.

        Holdings never written by the reconciler carry no version and count
        as stale.
        """
        if not isinstance(holding, Holding):
            holding = Holding.from_record(holding)
        current = await self.ledger_version_for(holding.ticker, holding.account_id)
        return holding.ledger_version != current

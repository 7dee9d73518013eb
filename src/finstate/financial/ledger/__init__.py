"""Lot ledger and ledger-derived holdings."""

from .lots import LotLedger, ledger_version
from .reconciler import (
    DEFAULT_COST_BASIS_TOLERANCE,
    HoldingsReconciler,
    ReconcileResult,
    ReconcileStatus,
)

__all__ = [
    "DEFAULT_COST_BASIS_TOLERANCE",
    "HoldingsReconciler",
    "LotLedger",
    "ReconcileResult",
    "ReconcileStatus",
    "ledger_version",
]

"""Finstate — deterministic financial state engine.

Multi-year cash-flow projection and ledger-derived holdings reconciliation.
"""

__version__ = "0.1.0"

"""
Finstate exception hierarchy.

All finstate exceptions inherit from FinStateError, making it easy for consumers
to catch library-level errors while still distinguishing specific failure modes.
Entity-store failures live in ``finstate.core.store.base`` and also derive
from FinStateError.
"""


class FinStateError(Exception):
    """Base exception class for all finstate errors."""


class ConfigurationError(FinStateError):
    """Raised for configuration errors (missing keys, invalid values)."""


class DataProcessingError(FinStateError):
    """Raised when a snapshot or ledger file cannot be parsed."""


class ReconciliationError(FinStateError):
    """Raised for invalid reconciliation requests (e.g. empty ticker)."""

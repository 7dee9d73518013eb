"""Financial engine — cash-flow projection and ledger-derived holdings."""

from .models import (
    QUANTITY_EPSILON,
    Affects,
    Goal,
    Holding,
    Liability,
    LifeEvent,
    Lot,
    UserSettings,
)

__all__ = [
    "QUANTITY_EPSILON",
    "Affects",
    "Goal",
    "Holding",
    "Liability",
    "LifeEvent",
    "Lot",
    "UserSettings",
]

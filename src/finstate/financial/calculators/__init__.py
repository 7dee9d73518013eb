"""Financial calculators — debt amortization, life events, goals, projection."""

from .debt import (
    PAID_OFF_THRESHOLD,
    AmortizationResult,
    DebtAmortizer,
    current_monthly_debt_payment,
    current_year_debt_payments,
)
from .goals import EXTRA_PAYMENT_SUFFIX, GoalExpense, GoalFundingCalculator
from .life_events import LifeEventImpact, LifeEventWindow
from .projection import (
    DEFAULT_HORIZON_YEARS,
    ProjectionEngine,
    ProjectionSummary,
    YearProjection,
    round_money,
    summarize,
)

__all__ = [
    "DEFAULT_HORIZON_YEARS",
    "EXTRA_PAYMENT_SUFFIX",
    "PAID_OFF_THRESHOLD",
    "AmortizationResult",
    "DebtAmortizer",
    "GoalExpense",
    "GoalFundingCalculator",
    "LifeEventImpact",
    "LifeEventWindow",
    "ProjectionEngine",
    "ProjectionSummary",
    "YearProjection",
    "current_monthly_debt_payment",
    "current_year_debt_payments",
    "round_money",
    "summarize",
]

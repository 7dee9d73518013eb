"""Year-by-year cash-flow projection.

Combines grown income, inflated budget expenses, amortized debt, life events
and goal spending into one record per calendar year, from the current year
through ``horizon_years`` ahead. Debt balances carry over between years
within a single ``project`` call; nothing else is stateful.

Amounts accumulate unrounded and are rounded to whole units only when a year
record is emitted. Totals are the sums of the emitted components, so
``total_expenses`` and ``net_cash_flow`` always add up exactly.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any

from loguru import logger

from finstate.core.config import Config
from finstate.financial.models import (
    DEFAULT_INCOME_GROWTH_RATE,
    DEFAULT_INFLATION_RATE,
    Goal,
    Liability,
    LifeEvent,
    UserSettings,
)

from .debt import MONTHS_PER_YEAR, DebtAmortizer
from .goals import GoalFundingCalculator
from .life_events import LifeEventWindow

DEFAULT_HORIZON_YEARS = 10


def round_money(value: float) -> int:
    """Round half up to a whole unit (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class YearProjection:
    """One emitted year of the projection. All amounts are whole units."""

    year: int
    total_income: int
    total_expenses: int
    base_expenses: int
    debt_payments: int
    life_event_expenses: int
    goal_expenses: int
    net_cash_flow: int
    event_names: tuple[str, ...] = ()

    @property
    def has_events(self) -> bool:
        return bool(self.event_names)

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the field names chart and table renderers key off."""
        return {
            "year": self.year,
            "totalIncome": self.total_income,
            "totalExpenses": self.total_expenses,
            "baseExpenses": self.base_expenses,
            "debtPayments": self.debt_payments,
            "lifeEventExpenses": self.life_event_expenses,
            "goalExpenses": self.goal_expenses,
            "netCashFlow": self.net_cash_flow,
            "hasEvents": self.has_events,
            "eventNames": list(self.event_names),
        }


@dataclass(frozen=True)
class ProjectionSummary:
    """Headline numbers for a projected series."""

    average_net_cash_flow: float
    lowest: YearProjection | None
    highest: YearProjection | None


def summarize(series: Iterable[YearProjection]) -> ProjectionSummary:
    """Average net cash flow plus the weakest and strongest years (first wins ties)."""
    years = list(series)
    if not years:
        return ProjectionSummary(average_net_cash_flow=0.0, lowest=None, highest=None)

    lowest = highest = years[0]
    for record in years[1:]:
        if record.net_cash_flow < lowest.net_cash_flow:
            lowest = record
        if record.net_cash_flow > highest.net_cash_flow:
            highest = record
    average = sum(r.net_cash_flow for r in years) / len(years)
    return ProjectionSummary(average_net_cash_flow=average, lowest=lowest, highest=highest)


def _coerce(items: Iterable[Any] | None, model: type) -> list:
    """Accept model instances or raw store records."""
    return [item if isinstance(item, model) else model.from_record(item) for item in items or ()]


class ProjectionEngine:
    """Produces the year-by-year cash-flow series.

    Args:
        horizon_years: Years projected after the current one.
        default_inflation_rate: Used when settings omit ``inflation_rate``.
        default_income_growth_rate: Used when settings omit ``income_growth_rate``.
    """

    def __init__(
        self,
        horizon_years: int = DEFAULT_HORIZON_YEARS,
        default_inflation_rate: float = DEFAULT_INFLATION_RATE,
        default_income_growth_rate: float = DEFAULT_INCOME_GROWTH_RATE,
    ):
        if horizon_years < 0:
            raise ValueError(f"horizon_years must be >= 0, got {horizon_years}")
        self.horizon_years = horizon_years
        self.default_inflation_rate = default_inflation_rate
        self.default_income_growth_rate = default_income_growth_rate

    @classmethod
    def from_config(cls, config: Config) -> ProjectionEngine:
        projection = config.validated().projection
        return cls(
            horizon_years=projection.horizon_years,
            default_inflation_rate=projection.default_inflation_rate,
            default_income_growth_rate=projection.default_income_growth_rate,
        )

    def _settings(self, settings: UserSettings | Mapping[str, Any] | None) -> UserSettings:
        if isinstance(settings, UserSettings):
            return settings
        return UserSettings.from_record(
            dict(settings or {}),
            default_inflation_rate=self.default_inflation_rate,
            default_income_growth_rate=self.default_income_growth_rate,
        )

    def project(
        self,
        monthly_income: float,
        monthly_budget_expenses: float,
        life_events: Iterable[LifeEvent | Mapping[str, Any]] = (),
        goals: Iterable[Goal | Mapping[str, Any]] = (),
        liabilities: Iterable[Liability | Mapping[str, Any]] = (),
        settings: UserSettings | Mapping[str, Any] | None = None,
        today: date | None = None,
    ) -> tuple[YearProjection, ...]:
        """Project ``horizon_years + 1`` years starting with the current one.

        Args:
            monthly_income: Current monthly income.
            monthly_budget_expenses: Current monthly budgeted spending.
            life_events: Events as models or store records.
            goals: Goals as models or store records.
            liabilities: Liabilities as models or store records.
            settings: Inflation and income growth rates.
            today: Reference date; the first year is simulated from its month.

        Returns:
            Tuple of YearProjection, entry 0 being the current year.
        """
        today = today or date.today()
        events = _coerce(life_events, LifeEvent)
        goal_list = _coerce(goals, Goal)
        debts = _coerce(liabilities, Liability)
        rates = self._settings(settings)

        window = LifeEventWindow(income_growth_rate=rates.income_growth_rate)
        funding = GoalFundingCalculator(goal_list, current_year=today.year)
        running_debt = [liability.current_balance for liability in debts]

        logger.debug(
            f"Projecting {self.horizon_years + 1} years from {today.year}: "
            f"{len(debts)} liabilities, {len(events)} life events, {len(goal_list)} goals"
        )

        series = []
        for i in range(self.horizon_years + 1):
            year = today.year + i
            year_income = (monthly_income or 0) * 12 * (1 + rates.income_growth_rate / 100) ** i
            base_expenses = (monthly_budget_expenses or 0) * 12 * (1 + rates.inflation_rate / 100) ** i

            # Debt
            extra_payments = funding.extra_payments(year)
            start_month = today.month - 1 if i == 0 else 0
            debt_payments = 0.0
            notes: list[str] = []
            for index, liability in enumerate(debts):
                balance = running_debt[index]
                if balance <= 0:
                    continue
                result = DebtAmortizer.for_liability(liability).simulate(
                    balance,
                    extra_payment=extra_payments.get(liability.id, 0.0),
                    start_month=start_month,
                    end_month=MONTHS_PER_YEAR,
                )
                running_debt[index] = result.ending_balance
                debt_payments += result.total_paid
                if result.total_paid > 0 and result.paid_off:
                    notes.append(f"Paid off {liability.name or liability.id}")

            # Life events
            life_event_income = 0.0
            life_event_expenses = 0.0
            for impact in window.evaluate_all(events, year):
                life_event_income += impact.income
                life_event_expenses += impact.expenses
                notes.append(impact.name)

            # Goals
            goal_expense_items = funding.expenses(year)
            goal_expenses = sum(item.amount for item in goal_expense_items)
            notes.extend(funding.labels(goal_expense_items))

            base = round_money(base_expenses)
            debt = round_money(debt_payments)
            life = round_money(life_event_expenses)
            goal = round_money(goal_expenses)
            total_income = round_money(year_income + life_event_income)
            total_expenses = base + debt + life + goal

            series.append(
                YearProjection(
                    year=year,
                    total_income=total_income,
                    total_expenses=total_expenses,
                    base_expenses=base,
                    debt_payments=debt,
                    life_event_expenses=life,
                    goal_expenses=goal,
                    net_cash_flow=total_income - total_expenses,
                    event_names=tuple(notes),
                )
            )

        return tuple(series)

"""Core financial data models.

Plain dataclasses for the records the engine consumes. Entity stores and
snapshot files hand over loose dicts; each model's ``from_record`` fills
missing numerics with 0 and missing booleans with False instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any

from finstate.core.exceptions import DataProcessingError
from finstate.core.types import Record

# Quantities below this are treated as zero everywhere in the ledger.
QUANTITY_EPSILON = 1e-8

DEFAULT_INFLATION_RATE = 3.0
DEFAULT_INCOME_GROWTH_RATE = 3.0


def to_float(value: Any, default: float = 0.0) -> float:
    """Coerce a loose numeric field; None and empty strings give *default*."""
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise DataProcessingError(f"Expected a number, got {value!r}") from e


def to_date(value: Any) -> date | None:
    """Parse a date field given as a date, datetime, or ISO-8601 string."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError as e:
            raise DataProcessingError(f"Invalid date: {value!r}") from e
    raise DataProcessingError(f"Invalid date: {value!r}")


def normalize_account_id(account_id: Any) -> str | None:
    """Collapse every "no account" spelling into the unassigned bucket (None)."""
    if account_id is None or account_id == "":
        return None
    return str(account_id)


class Affects(Enum):
    """What a life event's amount flows into."""

    INCOME = "income"
    EXPENSES = "expenses"
    ASSETS = "assets"

    @classmethod
    def parse(cls, value: Any) -> Affects | None:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return None


INCOME_CHANGE = "income_change"
DEBT_PAYOFF = "debt_payoff"


@dataclass
class Liability:
    """A debt being paid down.

    Attributes:
        id: Store identifier, used to link debt-payoff goals.
        name: Display name used in payoff notes.
        current_balance: Outstanding balance today.
        monthly_payment: Scheduled payment per month (0 = none).
        interest_rate: Annual rate in percent (e.g. 5 for 5%).
    """

    id: str
    name: str = ""
    current_balance: float = 0.0
    monthly_payment: float = 0.0
    interest_rate: float = 0.0

    def __post_init__(self):
        if self.current_balance < 0:
            raise ValueError(f"Liability {self.name or self.id} has negative balance: {self.current_balance}")
        if self.monthly_payment < 0:
            raise ValueError(f"Liability {self.name or self.id} has negative payment: {self.monthly_payment}")

    @classmethod
    def from_record(cls, record: Record) -> Liability:
        return cls(
            id=str(record.get("id", "")),
            name=record.get("name") or "",
            current_balance=to_float(record.get("current_balance")),
            monthly_payment=to_float(record.get("monthly_payment")),
            interest_rate=to_float(record.get("interest_rate")),
        )


@dataclass
class LifeEvent:
    """A one-off or recurring financial occurrence (raise, move, windfall).

    Attributes:
        name: Label shown next to the projection year.
        year: Calendar year the event starts.
        amount: Signed amount per active year.
        affects: Which side of the cash flow it hits (None = unrecognised).
        event_type: Free-form type; ``income_change`` grows with income.
        is_recurring: Repeat for ``recurring_years`` years from ``year``.
        recurring_years: Length of the recurring window.
    """

    name: str
    year: int
    amount: float = 0.0
    affects: Affects | None = None
    event_type: str = ""
    is_recurring: bool = False
    recurring_years: int = 1

    def is_active(self, year: int) -> bool:
        """True when *year* is the event year or inside its recurring window."""
        if year == self.year:
            return True
        return self.is_recurring and self.year <= year < self.year + self.recurring_years

    @classmethod
    def from_record(cls, record: Record) -> LifeEvent:
        return cls(
            name=record.get("name") or "",
            year=int(to_float(record.get("year"))),
            amount=to_float(record.get("amount")),
            affects=Affects.parse(record.get("affects")),
            event_type=record.get("event_type") or "",
            is_recurring=bool(record.get("is_recurring", False)),
            recurring_years=int(to_float(record.get("recurring_years"), default=1)) or 1,
        )


@dataclass
class Goal:
    """A funding goal: a planned purchase or an accelerated debt payoff."""

    name: str
    goal_type: str = ""
    target_amount: float = 0.0
    target_date: date | None = None
    will_be_spent: bool = False
    linked_liability_id: str | None = None
    payoff_years: float = 0.0

    @property
    def target_year(self) -> int | None:
        return self.target_date.year if self.target_date else None

    @property
    def is_debt_payoff(self) -> bool:
        return self.goal_type == DEBT_PAYOFF and bool(self.linked_liability_id) and self.payoff_years > 0

    @classmethod
    def from_record(cls, record: Record) -> Goal:
        linked = record.get("linked_liability_id")
        return cls(
            name=record.get("name") or "",
            goal_type=record.get("goal_type") or "",
            target_amount=to_float(record.get("target_amount")),
            target_date=to_date(record.get("target_date")),
            will_be_spent=bool(record.get("will_be_spent", False)),
            linked_liability_id=str(linked) if linked else None,
            payoff_years=to_float(record.get("payoff_years")),
        )


@dataclass
class UserSettings:
    """Growth assumptions, in percent per year."""

    inflation_rate: float = DEFAULT_INFLATION_RATE
    income_growth_rate: float = DEFAULT_INCOME_GROWTH_RATE

    @classmethod
    def from_record(
        cls,
        record: Record | None,
        default_inflation_rate: float = DEFAULT_INFLATION_RATE,
        default_income_growth_rate: float = DEFAULT_INCOME_GROWTH_RATE,
    ) -> UserSettings:
        record = record or {}
        return cls(
            inflation_rate=to_float(record.get("inflation_rate"), default=default_inflation_rate),
            income_growth_rate=to_float(record.get("income_growth_rate"), default=default_income_growth_rate),
        )


@dataclass
class Lot:
    """A buy/sell transaction record; buy records are cost-basis lots.

    ``remaining_quantity`` is maintained by whoever records sells; None
    means nothing has been consumed yet. ``date`` is kept as stored; only
    the store sorts on it.
    """

    id: str
    type: str
    asset_ticker: str
    account_id: str | None = None
    quantity: float = 0.0
    price_per_unit: float = 0.0
    cost_basis: float = 0.0
    remaining_quantity: float | None = None
    date: Any = None

    @property
    def is_buy(self) -> bool:
        return self.type == "buy"

    @property
    def remaining(self) -> float:
        """Unconsumed quantity, falling back to the full lot size."""
        if self.remaining_quantity is not None:
            return self.remaining_quantity
        return self.quantity

    @property
    def remaining_cost_basis(self) -> float:
        """Cost basis scaled by the unconsumed fraction of the lot."""
        if self.quantity <= 0:
            return 0.0
        return self.cost_basis * self.remaining / self.quantity

    @property
    def cost_per_unit(self) -> float:
        if self.price_per_unit:
            return self.price_per_unit
        if self.quantity:
            return self.cost_basis / self.quantity
        return 0.0

    @classmethod
    def from_record(cls, record: Record) -> Lot:
        remaining = record.get("remaining_quantity")
        return cls(
            id=str(record.get("id", "")),
            type=(record.get("type") or "").lower(),
            asset_ticker=record.get("asset_ticker") or "",
            account_id=normalize_account_id(record.get("account_id")),
            quantity=to_float(record.get("quantity")),
            price_per_unit=to_float(record.get("price_per_unit")),
            cost_basis=to_float(record.get("cost_basis")),
            remaining_quantity=None if remaining is None else to_float(remaining),
            date=record.get("date"),
        )


@dataclass
class Holding:
    """Per-account position derived from lots.

    ``ledger_version`` and ``reconciled_at`` record which ledger state the
    quantity and cost basis were last derived from.
    """

    id: str
    ticker: str
    account_id: str | None = None
    quantity: float = 0.0
    cost_basis_total: float = 0.0
    ledger_version: str | None = None
    reconciled_at: str | None = None

    @classmethod
    def from_record(cls, record: Record) -> Holding:
        return cls(
            id=str(record.get("id", "")),
            ticker=record.get("ticker") or "",
            account_id=normalize_account_id(record.get("account_id")),
            quantity=to_float(record.get("quantity")),
            cost_basis_total=to_float(record.get("cost_basis_total")),
            ledger_version=record.get("ledger_version"),
            reconciled_at=record.get("reconciled_at"),
        )

"""Month-by-month debt amortization.

Simulates a liability's balance through (part of) a calendar year:
interest accrues first, then the full scheduled payment plus any extra
payment comes off the balance. Also provides the "what am I paying on debt
right now" summaries shown next to the monthly budget.

Pure math — zero external dependencies.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from finstate.financial.models import Liability

MONTHS_PER_YEAR = 12

# A balance at or below this counts as paid off.
PAID_OFF_THRESHOLD = 0.01


@dataclass
class AmortizationResult:
    """Outcome of simulating one liability over a month range."""

    starting_balance: float
    ending_balance: float
    total_paid: float
    months_simulated: int = 0

    @property
    def paid_off(self) -> bool:
        return self.starting_balance > 0 and self.ending_balance <= PAID_OFF_THRESHOLD


@dataclass
class DebtAmortizer:
    """Balance simulator for a single liability.

    Attributes:
        monthly_payment: Scheduled payment per month.
        interest_rate: Annual interest rate in percent (e.g. 5 for 5%).
    """

    monthly_payment: float = 0.0
    interest_rate: float = 0.0

    @classmethod
    def for_liability(cls, liability: Liability) -> "DebtAmortizer":
        return cls(monthly_payment=liability.monthly_payment, interest_rate=liability.interest_rate)

    @property
    def monthly_rate(self) -> float:
        return self.interest_rate / 100 / MONTHS_PER_YEAR if self.interest_rate > 0 else 0.0

    def simulate(
        self,
        balance: float,
        extra_payment: float = 0.0,
        start_month: int = 0,
        end_month: int = MONTHS_PER_YEAR,
    ) -> AmortizationResult:
        """Run months ``start_month .. end_month - 1`` (0 = January).

        The attempted payment is counted in full every month, even when it
        exceeds what is left on the balance; overpayment is not carried as
        credit. Without any payment, interest accrues once as simple annual
        interest instead of compounding monthly.

        Args:
            balance: Balance at the start of ``start_month``.
            extra_payment: Additional monthly payment (e.g. from a payoff goal).
            start_month: First month simulated; the current month for the
                first projection year, 0 afterwards.
            end_month: Exclusive end of the range.

        Returns:
            AmortizationResult with ending balance and total paid.
        """
        payment = max(0.0, self.monthly_payment) + max(0.0, extra_payment)

        if payment <= 0:
            if self.interest_rate > 0:
                grown = balance + balance * (self.interest_rate / 100)
                return AmortizationResult(starting_balance=balance, ending_balance=grown, total_paid=0.0)
            return AmortizationResult(starting_balance=balance, ending_balance=balance, total_paid=0.0)

        remaining = balance
        total_paid = 0.0
        months = 0
        for _month in range(start_month, end_month):
            if remaining <= 0:
                break
            remaining += remaining * self.monthly_rate
            remaining = max(0.0, remaining - payment)
            total_paid += payment
            months += 1

        return AmortizationResult(
            starting_balance=balance,
            ending_balance=remaining,
            total_paid=total_paid,
            months_simulated=months,
        )


def _scheduled_payments(liability: Liability) -> Iterator[float]:
    """Yield the actual payment for each month of the year, January first.

    Unlike ``DebtAmortizer.simulate`` the final payment is clamped to what
    is owed, and the balance only drops by the principal portion.
    """
    balance = liability.current_balance
    monthly_rate = liability.interest_rate / 100 / MONTHS_PER_YEAR if liability.interest_rate > 0 else 0.0

    for _month in range(MONTHS_PER_YEAR):
        if balance <= 0:
            yield 0.0
            continue
        interest = balance * monthly_rate
        principal = max(0.0, liability.monthly_payment - interest)
        yield min(balance + interest, liability.monthly_payment)
        balance = max(0.0, balance - principal)


def current_monthly_debt_payment(liabilities: Iterable[Liability], month: int) -> float:
    """Total debt payment due in *month* (0 = January) of the current year.

    Only liabilities with a positive scheduled payment are counted.
    """
    if not 0 <= month < MONTHS_PER_YEAR:
        raise ValueError(f"month must be in 0..11, got {month}")

    total = 0.0
    for liability in liabilities:
        if liability.monthly_payment > 0:
            for index, paid in enumerate(_scheduled_payments(liability)):
                if index == month:
                    total += paid
                    break
    return total


def current_year_debt_payments(liabilities: Iterable[Liability]) -> float:
    """Total debt payments over the whole current calendar year."""
    return sum(
        sum(_scheduled_payments(liability)) for liability in liabilities if liability.monthly_payment > 0
    )

"""Life event windows for cash-flow projection.

A life event (raise, relocation, windfall, new child) hits the cash flow in
its start year, and for recurring events in every year of its window.
Income-type events grow with the income growth rate from their start year.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from finstate.financial.models import INCOME_CHANGE, Affects, LifeEvent


@dataclass
class LifeEventImpact:
    """What one active event contributes to a projection year."""

    name: str
    income: float = 0.0
    expenses: float = 0.0


class LifeEventWindow:
    """Resolves event activity and magnitude for a projection year.

    Args:
        income_growth_rate: Annual income growth in percent.
    """

    def __init__(self, income_growth_rate: float = 0.0):
        self.income_growth_rate = income_growth_rate

    def growth_multiplier(self, event: LifeEvent, year: int) -> float:
        """Compound income growth since the event started; 1 for non-income events."""
        if event.affects is Affects.INCOME or event.event_type == INCOME_CHANGE:
            return (1 + self.income_growth_rate / 100) ** max(0, year - event.year)
        return 1.0

    def evaluate(self, event: LifeEvent, year: int) -> LifeEventImpact | None:
        """Return the event's impact on *year*, or None when inactive.

        Income events add their signed amount to income. Expense events add
        the magnitude to expenses. Asset events are a windfall when positive
        and a one-off cost when negative. Events with an unrecognised target
        still show up by name but move no money.
        """
        if not event.is_active(year):
            return None

        amount = event.amount * self.growth_multiplier(event, year)
        impact = LifeEventImpact(name=event.name)

        if event.affects is Affects.INCOME:
            impact.income = amount
        elif event.affects is Affects.EXPENSES:
            impact.expenses = abs(amount)
        elif event.affects is Affects.ASSETS:
            if amount > 0:
                impact.income = amount
            elif amount < 0:
                impact.expenses = abs(amount)
        return impact

    def evaluate_all(self, events: Iterable[LifeEvent], year: int) -> list[LifeEventImpact]:
        """Impacts of every event active in *year*, in input order."""
        impacts = []
        for event in events:
            impact = self.evaluate(event, year)
            if impact is not None:
                impacts.append(impact)
        return impacts

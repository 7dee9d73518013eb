"""Goal-driven cash-flow effects.

Two kinds of goals move money in a projection:

- Lump-sum goals (``will_be_spent`` with a target date) are spent in full in
  the target year.
- Debt-payoff goals spread ``target_amount`` over ``payoff_years`` starting
  in the target year (or the current year). Each active year adds an extra
  monthly payment to the linked liability *and* an annualized goal expense.
  Both are reported; callers pick the line item they need.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from finstate.financial.models import Goal

EXTRA_PAYMENT_SUFFIX = "(extra payment)"


@dataclass
class GoalExpense:
    """One goal's contribution to a year's expenses."""

    label: str
    amount: float
    goal_name: str
    extra_payment: bool = False


class GoalFundingCalculator:
    """Resolves goal expenses and extra debt payments per projection year.

    Args:
        goals: Goals in display order.
        current_year: Start year for debt-payoff goals without a target date.
    """

    def __init__(self, goals: Iterable[Goal], current_year: int):
        self.goals = list(goals)
        self.current_year = current_year

    def payoff_start_year(self, goal: Goal) -> int:
        return goal.target_year if goal.target_year is not None else self.current_year

    def payoff_active(self, goal: Goal, year: int) -> bool:
        """True while *year* is inside the goal's ``[start, start + payoff_years)`` span."""
        if not goal.is_debt_payoff:
            return False
        start = self.payoff_start_year(goal)
        return start <= year < start + goal.payoff_years

    @staticmethod
    def annual_payoff_amount(goal: Goal) -> float:
        return goal.target_amount / goal.payoff_years

    def extra_payments(self, year: int) -> dict[str, float]:
        """Extra monthly payment per linked liability id for *year*.

        When several goals target the same liability the last one listed wins.
        """
        payments: dict[str, float] = {}
        for goal in self.goals:
            if self.payoff_active(goal, year):
                payments[goal.linked_liability_id] = self.annual_payoff_amount(goal) / 12
        return payments

    def expenses(self, year: int) -> list[GoalExpense]:
        """Lump-sum and debt-payoff expenses for *year*, in goal order."""
        expenses: list[GoalExpense] = []
        for goal in self.goals:
            if goal.will_be_spent and goal.target_year == year:
                expenses.append(GoalExpense(label=goal.name, amount=goal.target_amount, goal_name=goal.name))

            if self.payoff_active(goal, year):
                expenses.append(
                    GoalExpense(
                        label=f"{goal.name} {EXTRA_PAYMENT_SUFFIX}",
                        amount=self.annual_payoff_amount(goal),
                        goal_name=goal.name,
                        extra_payment=True,
                    )
                )
        return expenses

    @staticmethod
    def labels(expenses: Iterable[GoalExpense]) -> list[str]:
        """Display labels; an extra-payment line is dropped when its goal is already listed."""
        labels: list[str] = []
        for expense in expenses:
            if expense.extra_payment and expense.goal_name in labels:
                continue
            labels.append(expense.label)
        return labels

from dataclasses import dataclass, field
from datetime import date
from typing import List

from models.budget_items import PlannedExpense, RecurringItem


@dataclass(frozen=True)
class ProjectionEvent:
    label: str
    amount: float
    kind: str  # income | expense | planned
    sign: int  # +1 credit, -1 debit


@dataclass(frozen=True)
class ProjectionPoint:
    date: date
    balance: float
    events: List[ProjectionEvent] = field(default_factory=list)


@dataclass(frozen=True)
class AppliedItem:
    """A recurring item together with the amount it contributed this period."""
    item: RecurringItem
    amount: float


@dataclass(frozen=True)
class BalanceResult:
    reference_date: date
    initial_balance: float
    current_balance: float
    total_income: float
    total_expenses: float
    applied_incomes: List[AppliedItem]
    applied_expenses: List[AppliedItem]
    pending_incomes: List[RecurringItem]
    pending_expenses: List[RecurringItem]
    past_planned: List[PlannedExpense]
    past_planned_total: float
    past_planned_spent: float
    past_planned_pending: float

"""
Period Aggregator: Current balance from recurring and planned items

Pure functions over caller-supplied snapshots. Every recurring item is
evaluated exactly once through ``occurred_amount``; the totals and the
applied/pending partition are both built from that single value.
"""
from datetime import date
from typing import Dict, Iterable, List

from models.budget_items import PlannedExpense, RecurringItem
from models.projection_dto import AppliedItem, BalanceResult
from services.occurrence_engine import occurred_amount


def _evaluate(items: Iterable[RecurringItem], reference_date: date):
    applied: List[AppliedItem] = []
    pending: List[RecurringItem] = []
    total = 0.0

    for item in items:
        amount = occurred_amount(item, reference_date)
        if amount:
            applied.append(AppliedItem(item=item, amount=amount))
            total += amount
        else:
            pending.append(item)

    return total, applied, pending


def compute_balance(incomes: Iterable[RecurringItem],
                    expenses: Iterable[RecurringItem],
                    planned_expenses: Iterable[PlannedExpense],
                    initial_balance: float,
                    reference_date: date) -> BalanceResult:
    """Balance as of ``reference_date``.

    ``current_balance`` is ``initial_balance`` plus occurred incomes minus
    occurred expenses. Planned expenses dated on or before the reference date
    land in the ``past_planned_*`` figures whatever their ``spent`` flag; the
    flag only decides between the spent and pending sub-totals.
    """
    total_income, applied_incomes, pending_incomes = _evaluate(incomes, reference_date)
    total_expenses, applied_expenses, pending_expenses = _evaluate(expenses, reference_date)

    past_planned = [p for p in planned_expenses if p.date <= reference_date]
    past_spent = sum(p.amount for p in past_planned if p.spent)
    past_pending = sum(p.amount for p in past_planned if not p.spent)

    return BalanceResult(
        reference_date=reference_date,
        initial_balance=initial_balance,
        current_balance=initial_balance + total_income - total_expenses,
        total_income=total_income,
        total_expenses=total_expenses,
        applied_incomes=applied_incomes,
        applied_expenses=applied_expenses,
        pending_incomes=pending_incomes,
        pending_expenses=pending_expenses,
        past_planned=sort_by_date(past_planned),
        past_planned_total=past_spent + past_pending,
        past_planned_spent=past_spent,
        past_planned_pending=past_pending,
    )


def past_transactions(result: BalanceResult) -> Dict[str, list]:
    """Group a BalanceResult for the "already applied" view."""
    return {
        "incomes": result.applied_incomes,
        "expenses": result.applied_expenses,
        "planned_spent": [p for p in result.past_planned if p.spent],
        "planned_pending": [p for p in result.past_planned if not p.spent],
    }


def planned_statistics(planned_expenses: Iterable[PlannedExpense]) -> Dict[str, Dict[str, float]]:
    stats = {
        "total": {"count": 0, "amount": 0.0},
        "spent": {"count": 0, "amount": 0.0},
        "unspent": {"count": 0, "amount": 0.0},
    }
    for expense in planned_expenses:
        bucket = "spent" if expense.spent else "unspent"
        for key in ("total", bucket):
            stats[key]["count"] += 1
            stats[key]["amount"] += expense.amount
    return stats


def filter_active_or_spent(planned_expenses: Iterable[PlannedExpense], today: date) -> List[PlannedExpense]:
    """Drop unspent planned expenses whose date has already passed."""
    return [p for p in planned_expenses if p.spent or p.date >= today]


def sort_by_date(planned_expenses: Iterable[PlannedExpense]) -> List[PlannedExpense]:
    return sorted(planned_expenses, key=lambda p: p.date)

from datetime import date
from typing import Iterable, List

from models.budget_items import ItemKind, PlannedExpense, RecurringItem
from models.projection_dto import ProjectionEvent, ProjectionPoint
from services.frequency_rules import is_due_on
from services.period_aggregator import compute_balance
from utils.dates import iter_days


def events_on(day: date,
              incomes: List[RecurringItem],
              expenses: List[RecurringItem],
              planned_expenses: List[PlannedExpense]) -> List[ProjectionEvent]:
    """Everything exactly due on ``day``, incomes first."""
    events = []
    for income in incomes:
        if is_due_on(income, day):
            events.append(ProjectionEvent(income.label, income.amount, ItemKind.INCOME, 1))
    for expense in expenses:
        if is_due_on(expense, day):
            events.append(ProjectionEvent(expense.label, expense.amount, ItemKind.EXPENSE, -1))
    for planned in planned_expenses:
        # spent or not, the full planned schedule is shown
        if planned.date == day:
            events.append(ProjectionEvent(planned.label, planned.amount, ItemKind.PLANNED, -1))
    return events


def project(incomes: Iterable[RecurringItem],
            expenses: Iterable[RecurringItem],
            planned_expenses: Iterable[PlannedExpense],
            initial_balance: float,
            start_date: date,
            horizon_days: int) -> List[ProjectionPoint]:
    """Day-by-day balance walk of ``horizon_days`` points from ``start_date``.

    The walk is anchored on the Period Aggregator's balance for
    ``start_date``. Events dated on ``start_date`` are reported on the first
    point but are not applied again: they are already part of the anchor.
    Amounts are added as-is; rounding is left to the presentation layer.
    """
    incomes = list(incomes)
    expenses = list(expenses)
    planned_expenses = list(planned_expenses)

    running = compute_balance(incomes, expenses, planned_expenses,
                              initial_balance, start_date).current_balance

    points = []
    for day in iter_days(start_date, max(horizon_days, 0)):
        events = events_on(day, incomes, expenses, planned_expenses)
        if day > start_date:
            for event in events:
                running += event.sign * event.amount
        points.append(ProjectionPoint(date=day, balance=running, events=events))

    return points


def first_negative_point(points: Iterable[ProjectionPoint]):
    for point in points:
        if point.balance < 0:
            return point
    return None

from dataclasses import replace
from datetime import date

import pytest

from models.budget_items import PlannedExpense
from services.occurrence_engine import occurred_amount
from services.period_aggregator import (
    compute_balance,
    filter_active_or_spent,
    past_transactions,
    planned_statistics,
    sort_by_date,
)

JULY_8 = date(2025, 7, 8)


def test_reconciliation_scenario(july_budget):
    result = compute_balance(july_budget["incomes"], july_budget["expenses"], [],
                             july_budget["initial_balance"], JULY_8)

    assert result.total_income == 2500
    assert result.total_expenses == 800
    assert result.current_balance == 2700


def test_insurance_due_today_is_applied(july_budget):
    expenses = list(july_budget["expenses"])
    expenses[1] = replace(expenses[1], day_of_month=8)

    result = compute_balance(july_budget["incomes"], expenses, [],
                             july_budget["initial_balance"], JULY_8)

    assert result.current_balance == 2580
    assert [a.item.label for a in result.applied_expenses] == ["Rent", "Car insurance"]


def test_applied_and_pending_partition_reconciles(july_budget):
    result = compute_balance(july_budget["incomes"], july_budget["expenses"], [],
                             july_budget["initial_balance"], JULY_8)

    assert [p.label for p in result.pending_expenses] == ["Car insurance", "Property tax"]
    assert sum(a.amount for a in result.applied_incomes) == result.total_income
    assert sum(a.amount for a in result.applied_expenses) == result.total_expenses
    for applied in result.applied_expenses:
        assert applied.amount == occurred_amount(applied.item, JULY_8)
    assert result.initial_balance + result.total_income - result.total_expenses == result.current_balance


def test_planned_expenses_bucketed_by_date_not_spent_flag(july_budget, planned):
    result = compute_balance(july_budget["incomes"], july_budget["expenses"], planned,
                             july_budget["initial_balance"], JULY_8)

    assert [p.label for p in result.past_planned] == ["Concert tickets", "Gift"]
    assert result.past_planned_total == pytest.approx(135.5)
    assert result.past_planned_spent == 90
    assert result.past_planned_pending == pytest.approx(45.5)
    # planned expenses do not move the recurring balance
    assert result.current_balance == 2700


def test_past_transactions_groups(july_budget, planned):
    result = compute_balance(july_budget["incomes"], july_budget["expenses"], planned,
                             july_budget["initial_balance"], JULY_8)

    groups = past_transactions(result)

    assert [a.item.label for a in groups["incomes"]] == ["Salary"]
    assert [a.item.label for a in groups["expenses"]] == ["Rent"]
    assert [p.label for p in groups["planned_spent"]] == ["Concert tickets"]
    assert [p.label for p in groups["planned_pending"]] == ["Gift"]


def test_empty_inputs_give_initial_balance():
    result = compute_balance([], [], [], 321.5, JULY_8)
    assert result.current_balance == 321.5
    assert result.total_income == 0
    assert result.past_planned_total == 0


def test_planned_statistics(planned):
    stats = planned_statistics(planned)
    assert stats["total"] == {"count": 3, "amount": pytest.approx(435.5)}
    assert stats["spent"] == {"count": 1, "amount": 90}
    assert stats["unspent"]["count"] == 2


def test_filter_active_or_spent_hides_expired_unspent(planned):
    expired = PlannedExpense(label="Old plan", amount=20, date=date(2025, 6, 1))
    kept = filter_active_or_spent(planned + [expired], date(2025, 7, 9))
    assert [p.label for p in kept] == ["Concert tickets", "Holiday deposit"]


def test_sort_by_date(planned):
    assert sort_by_date(reversed(planned)) == planned

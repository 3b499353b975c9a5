from datetime import date

import pytest

import db
from models.budget_items import Frequency, FrequencyData, PlannedExpense, RecurringItem


@pytest.fixture
def temp_db(tmp_path, monkeypatch):
    """Point the app at a fresh DuckDB file with the schema in place."""
    monkeypatch.setattr(db, "DB_FILE", str(tmp_path / "budget_test.duckdb"))
    db.init_db()
    return db


@pytest.fixture
def july_budget():
    """Budget from the balance reconciliation scenario (reference date 2025-07-08)."""
    incomes = [
        RecurringItem(label="Salary", amount=2500, day_of_month=5),
    ]
    expenses = [
        RecurringItem(label="Rent", amount=800, day_of_month=1),
        RecurringItem(label="Car insurance", amount=120, day_of_month=15,
                      frequency=Frequency.QUARTERLY,
                      frequency_data=FrequencyData(months=[1, 4, 7, 10])),
        RecurringItem(label="Property tax", amount=600, day_of_month=20,
                      frequency=Frequency.YEARLY,
                      frequency_data=FrequencyData(months=[10])),
    ]
    return {"initial_balance": 1000, "incomes": incomes, "expenses": expenses}


@pytest.fixture
def planned():
    return [
        PlannedExpense(label="Concert tickets", amount=90, date=date(2025, 7, 3), spent=True),
        PlannedExpense(label="Gift", amount=45.5, date=date(2025, 7, 8), spent=False),
        PlannedExpense(label="Holiday deposit", amount=300, date=date(2025, 7, 12), spent=False),
    ]

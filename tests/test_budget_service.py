from datetime import date, datetime

import pytest

from repositories.adjustments_repository import add_adjustment
from repositories.planned_expenses_repository import add_planned_expense
from repositories.recurring_items_repository import add_recurring_item
from repositories.settings_repository import update_settings
from services import budget_service

JULY_8 = date(2025, 7, 8)
USER = "demo"


@pytest.fixture
def seeded(temp_db):
    conn = temp_db.get_db()
    try:
        update_settings(conn, USER, initial_balance=1000)
        add_recurring_item(conn, USER, "income", "Salary", 2500, 5)
        add_recurring_item(conn, USER, "expense", "Rent", 800, 1)
        add_recurring_item(conn, USER, "expense", "Car insurance", 120, 15,
                           frequency="QUARTERLY", frequency_data='{"months": [1, 4, 7, 10]}')
        add_recurring_item(conn, USER, "expense", "Property tax", 600, 20,
                           frequency="YEARLY", frequency_data='{"months": [10]}')
        add_planned_expense(conn, USER, "Holiday deposit", 300, date(2025, 7, 12))
    finally:
        conn.close()
    return temp_db


def test_get_balance_from_store(seeded):
    report = budget_service.get_balance(USER, JULY_8)

    assert report.result.current_balance == 2700
    assert report.snapshot.baseline == 1000
    assert report.planned_stats["unspent"]["amount"] == 300


def test_new_user_gets_default_settings(temp_db):
    report = budget_service.get_balance("someone-new", JULY_8)
    assert report.result.current_balance == 0
    assert report.snapshot.settings.month_start_day == 1


def test_adjustments_shift_balance_and_projection_alike(seeded):
    report = budget_service.adjust_balance(USER, -75.25, "Bank fees", "correction", today=JULY_8)
    projection = budget_service.get_projection(USER, JULY_8, 10)

    assert report.result.current_balance == pytest.approx(2624.75)
    assert projection.timeline[0].balance == pytest.approx(report.result.current_balance)
    assert report.snapshot.settings.adjustments[0].type == "CORRECTION"


def test_projection_walks_forward_from_balance(seeded):
    projection = budget_service.get_projection(USER, JULY_8, 10)

    assert len(projection.timeline) == 10
    assert projection.end_date == date(2025, 7, 17)
    assert projection.starting_balance == 2700
    by_date = {p.date: p.balance for p in projection.timeline}
    assert by_date[date(2025, 7, 12)] == 2400
    assert by_date[date(2025, 7, 15)] == 2280


def test_past_transactions(seeded):
    groups = budget_service.get_past_transactions(USER, JULY_8)
    assert [a.item.label for a in groups["expenses"]] == ["Rent"]
    assert groups["planned_pending"] == []


@pytest.mark.parametrize("raw, expected", [
    (None, "MANUAL_ADJUSTMENT"),
    ("manual_adjustment", "MANUAL_ADJUSTMENT"),
    ("correction", "CORRECTION"),
    ("MONTHLY_RESET", "MONTHLY_RESET"),
    ("something else", "MANUAL_ADJUSTMENT"),
])
def test_normalize_adjustment_type(raw, expected):
    assert budget_service.normalize_adjustment_type(raw) == expected


def test_alerts_warn_about_projected_negative_balance(temp_db):
    conn = temp_db.get_db()
    try:
        update_settings(conn, USER, initial_balance=500)
        add_recurring_item(conn, USER, "expense", "Rent", 800, 10)
    finally:
        conn.close()

    alerts = budget_service.get_alerts(USER, JULY_8, 5)

    assert [a["type"] for a in alerts] == ["warning"]
    assert alerts[0]["date"] == "2025-07-10"
    assert alerts[0]["amount"] == -300


def test_alerts_flag_negative_current_balance(temp_db):
    conn = temp_db.get_db()
    try:
        add_recurring_item(conn, USER, "expense", "Rent", 800, 1)
    finally:
        conn.close()

    alerts = budget_service.get_alerts(USER, JULY_8, 5)
    assert [a["type"] for a in alerts] == ["error"]


def test_reset_status_without_previous_reset():
    status = budget_service.compute_reset_status(date(2025, 7, 8), 10, None)
    assert status["next_reset"] == "2025-07-10"
    assert status["days_since_last_reset"] == 999
    assert status["is_reset_due"] is True
    assert status["last_reset"] is None


def test_reset_status_after_recent_reset():
    status = budget_service.compute_reset_status(date(2025, 7, 8), 10, datetime(2025, 6, 10, 9, 0))
    assert status["days_since_last_reset"] == 28
    assert status["is_reset_due"] is False


def test_reset_status_rolls_to_next_month():
    status = budget_service.compute_reset_status(date(2025, 12, 15), 1, None)
    assert status["next_reset"] == "2026-01-01"


def test_reset_status_from_store(seeded):
    conn = seeded.get_db()
    try:
        add_adjustment(conn, USER, 0, "Monthly reset", "MONTHLY_RESET")
    finally:
        conn.close()

    status = budget_service.get_monthly_reset_status(USER, JULY_8)
    assert status["last_reset"] is not None
    assert status["month_start_day"] == 1

### Budget service loads one user's snapshot from the store and runs the calculation core on it.
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import List, Optional

from db import get_db
from helpers.normalize import (
    normalize_adjustment_row,
    normalize_planned_row,
    normalize_recurring_row,
    normalize_settings_row,
)
from models.budget_items import ItemKind, PlannedExpense, RecurringItem, UserSettings
from models.projection_dto import BalanceResult, ProjectionPoint
from repositories.adjustments_repository import (
    add_adjustment,
    get_adjustment_total,
    get_adjustments,
    get_last_adjustment_of_type,
)
from repositories.planned_expenses_repository import get_planned_expenses
from repositories.recurring_items_repository import get_recurring_items
from repositories.settings_repository import get_or_create_settings
from services.frequency_rules import is_known_frequency
from services.period_aggregator import compute_balance, past_transactions, planned_statistics
from services.projection_engine import first_negative_point, project
from utils.dates import safe_date, add_months
from utils.money import to_amount

ADJUSTMENT_TYPES = ("MANUAL_ADJUSTMENT", "CORRECTION", "MONTHLY_RESET")
NEVER_RESET_DAYS = 999
RESET_OVERDUE_DAYS = 30


@dataclass(frozen=True)
class BudgetSnapshot:
    """Read-only view of everything the core needs for one user."""
    settings: UserSettings
    incomes: List[RecurringItem]
    expenses: List[RecurringItem]
    planned_expenses: List[PlannedExpense]
    adjustment_total: float

    @property
    def baseline(self) -> float:
        # manual adjustments shift the configured starting point
        return self.settings.initial_balance + self.adjustment_total


@dataclass(frozen=True)
class BalanceReport:
    snapshot: BudgetSnapshot
    result: BalanceResult
    planned_stats: dict


@dataclass(frozen=True)
class ProjectionReport:
    snapshot: BudgetSnapshot
    start_date: date
    end_date: date
    starting_balance: float
    timeline: List[ProjectionPoint]


def load_snapshot(user_id, conn=None) -> BudgetSnapshot:
    """Read settings, items, planned expenses and adjustments in one go.

    Opens and closes a database connection unless one is passed in.
    """
    own_conn = False
    if conn is None:
        conn = get_db()
        own_conn = True

    try:
        adjustments = [normalize_adjustment_row(r) for r in get_adjustments(conn, user_id)]
        settings = normalize_settings_row(get_or_create_settings(conn, user_id), adjustments)
        snapshot = BudgetSnapshot(
            settings=settings,
            incomes=[normalize_recurring_row(r) for r in get_recurring_items(conn, user_id, ItemKind.INCOME)],
            expenses=[normalize_recurring_row(r) for r in get_recurring_items(conn, user_id, ItemKind.EXPENSE)],
            planned_expenses=[normalize_planned_row(r) for r in get_planned_expenses(conn, user_id)],
            adjustment_total=to_amount(get_adjustment_total(conn, user_id)),
        )
    finally:
        if own_conn:
            conn.close()

    _warn_unknown_frequencies(user_id, snapshot)
    return snapshot


def _warn_unknown_frequencies(user_id, snapshot):
    for item in snapshot.incomes + snapshot.expenses:
        if not is_known_frequency(item.frequency):
            logging.warning(
                f"Unknown frequency {item.frequency!r} on item {item.id} ({item.label}) "
                f"for user {user_id}; treated as never occurring"
            )


def get_balance(user_id, today=None) -> BalanceReport:
    if today is None:
        today = date.today()

    snapshot = load_snapshot(user_id)
    result = compute_balance(snapshot.incomes, snapshot.expenses, snapshot.planned_expenses,
                             snapshot.baseline, today)

    logging.info(f"Balance calculated for user {user_id}: {result.current_balance}")
    return BalanceReport(
        snapshot=snapshot,
        result=result,
        planned_stats=planned_statistics(snapshot.planned_expenses),
    )


def get_past_transactions(user_id, today=None) -> dict:
    """Items already folded into the current balance, grouped for display."""
    report = get_balance(user_id, today)
    return past_transactions(report.result)


def get_projection(user_id, today=None, days=30) -> ProjectionReport:
    """Projection anchored on the same baseline as ``get_balance``."""
    if today is None:
        today = date.today()

    snapshot = load_snapshot(user_id)
    timeline = project(snapshot.incomes, snapshot.expenses, snapshot.planned_expenses,
                       snapshot.baseline, today, days)

    logging.info(f"Calculated projection for {days} days for user {user_id}")
    return ProjectionReport(
        snapshot=snapshot,
        start_date=today,
        end_date=today + timedelta(days=max(days - 1, 0)),
        starting_balance=timeline[0].balance if timeline else snapshot.baseline,
        timeline=timeline,
    )


def normalize_adjustment_type(type=None) -> str:
    """Accept lower- or upper-case adjustment types; default to MANUAL_ADJUSTMENT."""
    if not type:
        return "MANUAL_ADJUSTMENT"
    upper = type.strip().upper()
    return upper if upper in ADJUSTMENT_TYPES else "MANUAL_ADJUSTMENT"


def adjust_balance(user_id, amount, description, type=None, today=None) -> BalanceReport:
    """Record a manual correction and return the updated balance."""
    adjustment_type = normalize_adjustment_type(type)

    conn = get_db()
    try:
        get_or_create_settings(conn, user_id)
        add_adjustment(conn, user_id, amount, description, adjustment_type)
    except Exception as e:
        logging.error(f"Error adjusting balance for user {user_id}: {e}")
        raise
    finally:
        conn.close()

    logging.info(f"Balance adjusted for user {user_id}: {amount} - {description}")
    return get_balance(user_id, today)


def build_alerts(result: BalanceResult, timeline: List[ProjectionPoint]) -> List[dict]:
    alerts = []

    if result.current_balance < 0:
        alerts.append({
            "type": "error",
            "title": "Negative balance",
            "message": "Your current balance is negative. Reduce expenses or increase incomes.",
            "amount": result.current_balance,
        })

    negative = first_negative_point(timeline)
    if negative is not None and result.current_balance >= 0:
        days_ahead = (negative.date - result.reference_date).days
        alerts.append({
            "type": "warning",
            "title": "Projected negative balance",
            "message": f"Your balance is projected to go negative in {days_ahead} days.",
            "date": negative.date.isoformat(),
            "amount": negative.balance,
        })

    return alerts


def get_alerts(user_id, today=None, days=30) -> List[dict]:
    if today is None:
        today = date.today()

    snapshot = load_snapshot(user_id)
    result = compute_balance(snapshot.incomes, snapshot.expenses, snapshot.planned_expenses,
                             snapshot.baseline, today)
    timeline = project(snapshot.incomes, snapshot.expenses, snapshot.planned_expenses,
                       snapshot.baseline, today, days)

    alerts = build_alerts(result, timeline)
    logging.info(f"Generated {len(alerts)} alerts for user {user_id}")
    return alerts


def compute_reset_status(today: date, month_start_day: int, last_reset: Optional[datetime]) -> dict:
    """When the budget month rolls over and whether a reset is due."""
    start_day = month_start_day or 1

    year, month = today.year, today.month
    if today.day >= start_day:
        year, month = add_months(year, month, 1)
    next_reset = safe_date(year, month, start_day)
    while next_reset is None:
        # start day beyond the month's length, e.g. 31 in February
        start_day -= 1
        next_reset = safe_date(year, month, start_day)

    if last_reset is None:
        days_since = NEVER_RESET_DAYS
    else:
        last_day = last_reset.date() if isinstance(last_reset, datetime) else last_reset
        days_since = (today - last_day).days

    return {
        "last_reset": last_reset.isoformat() if last_reset else None,
        "next_reset": next_reset.isoformat(),
        "is_reset_due": days_since > RESET_OVERDUE_DAYS or today.day >= (month_start_day or 1),
        "days_since_last_reset": days_since,
        "month_start_day": month_start_day or 1,
    }


def get_monthly_reset_status(user_id, today=None) -> dict:
    if today is None:
        today = date.today()

    conn = get_db()
    try:
        settings = normalize_settings_row(get_or_create_settings(conn, user_id))
        last = get_last_adjustment_of_type(conn, user_id, "MONTHLY_RESET")
    finally:
        conn.close()

    return compute_reset_status(today, settings.month_start_day, last["created_at"] if last else None)


def get_summary(user_id, today=None, days=30) -> dict:
    if today is None:
        today = date.today()

    report = get_balance(user_id, today)
    timeline = project(report.snapshot.incomes, report.snapshot.expenses,
                       report.snapshot.planned_expenses, report.snapshot.baseline, today, days)

    return {
        "report": report,
        "alerts": build_alerts(report.result, timeline),
        "calculated_at": datetime.now().isoformat(),
    }

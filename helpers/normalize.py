# helpers/normalize.py
import json

from models.budget_items import (
    BalanceAdjustment,
    Frequency,
    FrequencyData,
    PlannedExpense,
    RecurringItem,
    UserSettings,
)
from utils.dates import parse_iso_date
from utils.money import to_amount


def parse_frequency_data(raw):
    """
    Convert stored frequency metadata (JSON text or dict) into FrequencyData.

    Anything unreadable becomes None so the frequency rules apply their
    defaults instead of failing.
    """
    if raw is None or raw == "":
        return None

    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            return None

    if not isinstance(raw, dict):
        return None

    months = raw.get("months")
    if isinstance(months, (list, tuple)):
        months = [int(m) for m in months if isinstance(m, (int, float, str)) and str(m).strip().isdigit()]
    else:
        months = None

    return FrequencyData(months=months, date=parse_iso_date(raw.get("date")))


def dump_frequency_data(data):
    """Inverse of parse_frequency_data, for writing to the store."""
    if data is None:
        return None

    payload = {}
    if data.get("months") is not None:
        payload["months"] = list(data["months"])
    if data.get("date") is not None:
        payload["date"] = str(data["date"])
    return json.dumps(payload) if payload else None


def normalize_recurring_row(row: dict) -> RecurringItem:
    """
    Convert a recurring_items row into a canonical RecurringItem
    """
    frequency = (row.get("frequency") or Frequency.MONTHLY).upper()
    return RecurringItem(
        id=row.get("id"),
        label=row.get("label") or "",
        amount=to_amount(row["amount"]),
        day_of_month=int(row["day_of_month"]),
        frequency=frequency,
        frequency_data=parse_frequency_data(row.get("frequency_data")),
        category=row.get("category"),
    )


def normalize_planned_row(row: dict) -> PlannedExpense:
    return PlannedExpense(
        id=row.get("id"),
        label=row.get("label") or "",
        amount=to_amount(row["amount"]),
        date=parse_iso_date(row["date"]),
        spent=bool(row.get("spent")),
        category=row.get("category"),
    )


def normalize_adjustment_row(row: dict) -> BalanceAdjustment:
    return BalanceAdjustment(
        id=row.get("id"),
        amount=to_amount(row["amount"]),
        description=row.get("description") or "",
        type=row.get("type") or "MANUAL_ADJUSTMENT",
        created_at=row.get("created_at"),
    )


def normalize_settings_row(row: dict, adjustments=None) -> UserSettings:
    return UserSettings(
        user_id=row["user_id"],
        initial_balance=to_amount(row.get("initial_balance") or 0),
        month_start_day=int(row.get("month_start_day") or 1),
        currency=row.get("currency") or "EUR",
        adjustments=list(adjustments or []),
    )

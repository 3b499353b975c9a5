"""
Occurrence Engine: How much of an item has happened this period

Pure function over a RecurringItem snapshot and a reference date.
No database access; no side effects; never raises for odd metadata.
"""
from datetime import date

from models.budget_items import Frequency, RecurringItem
from services.frequency_rules import resolve_months, resolve_one_time_date


def occurred_amount(item: RecurringItem, reference_date: date) -> float:
    """
    Return the part of ``item.amount`` already realized in the current
    calendar month as of ``reference_date``.

    Args:
        item: Recurring income or expense.
        reference_date: "Today" as supplied by the caller.

    Returns:
        ``item.amount`` when the item's due date in the current month is on or
        before ``reference_date``, else ``0.0``. Quarterly and yearly items
        contribute only in their applicable months (full amount, no spread).
        ONE_TIME items compare their exact date, not ``day_of_month``.
        Unknown frequencies contribute ``0.0``.

    Pure function: same inputs → same output, no side effects.
    """
    frequency = item.frequency

    if frequency == Frequency.MONTHLY:
        return item.amount if item.day_of_month <= reference_date.day else 0.0

    if frequency in (Frequency.QUARTERLY, Frequency.YEARLY):
        if reference_date.month not in resolve_months(item):
            return 0.0
        return item.amount if item.day_of_month <= reference_date.day else 0.0

    if frequency == Frequency.ONE_TIME:
        one_time = resolve_one_time_date(item)
        if one_time is None:
            return 0.0
        same_month = (one_time.year, one_time.month) == (reference_date.year, reference_date.month)
        return item.amount if same_month and one_time <= reference_date else 0.0

    return 0.0

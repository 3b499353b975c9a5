"""
Frequency Rules: Calendar semantics of recurring items

Pure functions answering "which months / which day" questions for a
RecurringItem. Shared by the occurrence, aggregation and projection engines so
they all resolve frequency metadata the same way.
"""
from datetime import date
from typing import List, Optional

from models.budget_items import Frequency, RecurringItem
from utils.dates import add_months, parse_iso_date, safe_date

DEFAULT_MONTHS = {
    Frequency.QUARTERLY: (1, 4, 7, 10),
    Frequency.YEARLY: (1,),
}

# Longest gap between two due dates of a yearly item, plus slack for day 31.
_SEARCH_MONTHS = 25


def is_known_frequency(frequency) -> bool:
    return frequency in Frequency.ALL


def resolve_months(item: RecurringItem) -> List[int]:
    """Applicable months for QUARTERLY/YEARLY items.

    Missing metadata falls back to DEFAULT_MONTHS. An explicit empty list is
    kept as is (the item is then never due).
    """
    data = item.frequency_data
    if data is not None and data.months is not None:
        return list(data.months)
    return list(DEFAULT_MONTHS.get(item.frequency, ()))


def resolve_one_time_date(item: RecurringItem) -> Optional[date]:
    data = item.frequency_data
    if data is None:
        return None
    return parse_iso_date(data.date)


def is_due_in_month(item: RecurringItem, year: int, month: int) -> bool:
    """True if the item has a due date somewhere in the given month."""
    if item.frequency == Frequency.MONTHLY:
        return True
    if item.frequency in (Frequency.QUARTERLY, Frequency.YEARLY):
        return month in resolve_months(item)
    if item.frequency == Frequency.ONE_TIME:
        one_time = resolve_one_time_date(item)
        return one_time is not None and (one_time.year, one_time.month) == (year, month)
    return False


def is_due_on(item: RecurringItem, day: date) -> bool:
    """True if the item is due exactly on ``day`` (not merely "by" it)."""
    if item.frequency == Frequency.ONE_TIME:
        return resolve_one_time_date(item) == day
    if item.day_of_month != day.day:
        return False
    return is_due_in_month(item, day.year, day.month)


def next_due_date(item: RecurringItem, today: date) -> Optional[date]:
    """First due date strictly after ``today``, or None if there is none.

    Months that do not contain ``day_of_month`` (e.g. the 31st in April) are
    skipped, matching ``is_due_on``.
    """
    if item.frequency == Frequency.ONE_TIME:
        one_time = resolve_one_time_date(item)
        return one_time if one_time is not None and one_time > today else None

    if not is_known_frequency(item.frequency):
        return None

    for delta in range(_SEARCH_MONTHS):
        year, month = add_months(today.year, today.month, delta)
        if not is_due_in_month(item, year, month):
            continue
        candidate = safe_date(year, month, item.day_of_month)
        if candidate is not None and candidate > today:
            return candidate

    return None

from calendar import monthrange
from datetime import date, datetime, timedelta
from typing import Iterator, Optional


def parse_iso_date(raw) -> Optional[date]:
    """Best-effort conversion of a stored date value to ``date``.

    Accepts ``date``/``datetime`` objects and ISO strings, including
    timestamps such as ``2025-07-08T00:00:00.000Z``. Returns ``None`` when the
    value cannot be read.
    """
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if not isinstance(raw, str):
        return None

    try:
        return date.fromisoformat(raw.strip()[:10])
    except ValueError:
        return None


def safe_date(year: int, month: int, day: int) -> Optional[date]:
    """``date(year, month, day)`` or ``None`` when the day does not exist."""
    if day < 1 or day > monthrange(year, month)[1]:
        return None
    return date(year, month, day)


def add_months(year: int, month: int, delta: int):
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def iter_days(start: date, count: int) -> Iterator[date]:
    for offset in range(count):
        yield start + timedelta(days=offset)

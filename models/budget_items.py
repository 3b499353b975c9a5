from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional


class Frequency:
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    YEARLY = "YEARLY"
    ONE_TIME = "ONE_TIME"

    ALL = (MONTHLY, QUARTERLY, YEARLY, ONE_TIME)


class ItemKind:
    INCOME = "income"
    EXPENSE = "expense"
    PLANNED = "planned"


@dataclass(frozen=True)
class FrequencyData:
    """Optional frequency metadata.

    ``months`` applies to QUARTERLY/YEARLY items, ``date`` to ONE_TIME ones.
    ``None`` means "not provided" and is resolved to defaults by the rules.
    """
    months: Optional[List[int]] = None
    date: Optional[date] = None


@dataclass(frozen=True)
class RecurringItem:
    """Recurring income or expense as read from the data store."""
    label: str
    amount: float
    day_of_month: int
    frequency: str = Frequency.MONTHLY
    frequency_data: Optional[FrequencyData] = None
    category: Optional[str] = None
    id: Optional[int] = None


@dataclass(frozen=True)
class PlannedExpense:
    """One-off budget item with a realized/unrealized flag."""
    label: str
    amount: float
    date: date
    spent: bool = False
    category: Optional[str] = None
    id: Optional[int] = None


@dataclass(frozen=True)
class BalanceAdjustment:
    amount: float
    description: str
    type: str = "MANUAL_ADJUSTMENT"
    created_at: Optional[datetime] = None
    id: Optional[int] = None


@dataclass(frozen=True)
class UserSettings:
    user_id: str
    initial_balance: float = 0.0
    month_start_day: int = 1
    currency: str = "EUR"
    adjustments: List[BalanceAdjustment] = field(default_factory=list)

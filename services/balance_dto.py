from dataclasses import dataclass
from typing import List, Optional

from utils.money import round_money


@dataclass
class ItemDTO:
    id: Optional[int]
    label: str
    amount: float
    day_of_month: Optional[int] = None
    frequency: Optional[str] = None
    category: Optional[str] = None
    date: Optional[str] = None  # ISO format, planned expenses only
    spent: Optional[bool] = None

    @classmethod
    def from_recurring(cls, item, amount=None):
        return cls(
            id=item.id,
            label=item.label,
            amount=round_money(item.amount if amount is None else amount),
            day_of_month=item.day_of_month,
            frequency=item.frequency,
            category=item.category,
        )

    @classmethod
    def from_planned(cls, expense):
        return cls(
            id=expense.id,
            label=expense.label,
            amount=round_money(expense.amount),
            category=expense.category,
            date=expense.date.isoformat(),
            spent=expense.spent,
        )


@dataclass
class AdjustmentDTO:
    id: Optional[int]
    amount: float
    description: str
    type: str
    date: Optional[str]

    @classmethod
    def from_adjustment(cls, adjustment):
        return cls(
            id=adjustment.id,
            amount=round_money(adjustment.amount),
            description=adjustment.description,
            type=adjustment.type,
            date=adjustment.created_at.isoformat() if adjustment.created_at else None,
        )


@dataclass
class BalanceResponseDTO:
    """Balance figures rounded to cents for display."""
    reference_date: str  # ISO format
    initial_balance: float
    total_adjustments: float
    current_balance: float
    total_income: float
    total_expenses: float
    past_planned_total: float
    total_planned: float  # unspent planned expenses, any date
    currency: str
    adjustments: List[AdjustmentDTO]

    @classmethod
    def from_report(cls, report):
        """Convert BalanceReport to JSON-serializable DTO."""
        result = report.result
        settings = report.snapshot.settings
        return cls(
            reference_date=result.reference_date.isoformat(),
            initial_balance=round_money(settings.initial_balance),
            total_adjustments=round_money(report.snapshot.adjustment_total),
            current_balance=round_money(result.current_balance),
            total_income=round_money(result.total_income),
            total_expenses=round_money(result.total_expenses),
            past_planned_total=round_money(result.past_planned_total),
            total_planned=round_money(report.planned_stats["unspent"]["amount"]),
            currency=settings.currency,
            adjustments=[AdjustmentDTO.from_adjustment(a) for a in settings.adjustments],
        )


@dataclass
class PastTransactionsDTO:
    reference_date: str
    incomes: List[ItemDTO]
    expenses: List[ItemDTO]
    planned_spent: List[ItemDTO]
    planned_pending: List[ItemDTO]
    total_income: float
    total_expenses: float
    past_planned_total: float

    @classmethod
    def from_groups(cls, reference_date, groups):
        incomes = [ItemDTO.from_recurring(a.item, a.amount) for a in groups["incomes"]]
        expenses = [ItemDTO.from_recurring(a.item, a.amount) for a in groups["expenses"]]
        planned_spent = [ItemDTO.from_planned(p) for p in groups["planned_spent"]]
        planned_pending = [ItemDTO.from_planned(p) for p in groups["planned_pending"]]
        return cls(
            reference_date=reference_date.isoformat(),
            incomes=incomes,
            expenses=expenses,
            planned_spent=planned_spent,
            planned_pending=planned_pending,
            # summed from the unrounded amounts so they match the balance
            total_income=round_money(sum(a.amount for a in groups["incomes"])),
            total_expenses=round_money(sum(a.amount for a in groups["expenses"])),
            past_planned_total=round_money(
                sum(p.amount for p in groups["planned_spent"] + groups["planned_pending"])
            ),
        )


@dataclass
class ProjectionEventDTO:
    label: str
    amount: float
    kind: str


@dataclass
class ProjectionDayDTO:
    """Single day in the projection timeline."""
    date: str  # ISO format YYYY-MM-DD
    day: int
    balance: float
    events: List[ProjectionEventDTO]


@dataclass
class ProjectionResponseDTO:
    start_date: str  # ISO format
    end_date: str  # ISO format
    starting_balance: float
    lowest_balance: Optional[float]
    timeline: List[ProjectionDayDTO]

    @classmethod
    def from_projection(cls, projection):
        """Convert ProjectionReport to JSON-serializable DTO."""
        timeline = [
            ProjectionDayDTO(
                date=point.date.isoformat(),
                day=index,
                balance=round_money(point.balance),
                events=[
                    ProjectionEventDTO(
                        label=event.label,
                        amount=round_money(event.sign * event.amount),
                        kind=event.kind,
                    )
                    for event in point.events
                ],
            )
            for index, point in enumerate(projection.timeline)
        ]
        lowest = min((p.balance for p in projection.timeline), default=None)
        return cls(
            start_date=projection.start_date.isoformat(),
            end_date=projection.end_date.isoformat(),
            starting_balance=round_money(projection.starting_balance),
            lowest_balance=round_money(lowest) if lowest is not None else None,
            timeline=timeline,
        )

import logging
from datetime import date
from dataclasses import asdict
from typing import Annotated, List, Literal, Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from db import get_db
from helpers.normalize import dump_frequency_data, normalize_planned_row, normalize_recurring_row
from models.budget_items import ItemKind
from repositories.planned_expenses_repository import (
    add_planned_expense,
    delete_planned_expense,
    get_planned_expenses,
    set_spent,
)
from repositories.recurring_items_repository import (
    add_recurring_item,
    delete_recurring_item,
    get_recurring_items,
)
from services.balance_dto import ItemDTO
from services.frequency_rules import next_due_date
from services.period_aggregator import filter_active_or_spent, planned_statistics
from utils.money import round_money

router = APIRouter()

Month = Annotated[int, Field(ge=1, le=12)]
ISODate = date


class FrequencyDataIn(BaseModel):
    months: Optional[List[Month]] = None
    date: Optional[ISODate] = None


class RecurringItemCreate(BaseModel):
    label: str = Field(min_length=1)
    amount: float = Field(gt=0)
    day_of_month: int = Field(ge=1, le=31)
    frequency: Literal["MONTHLY", "QUARTERLY", "YEARLY", "ONE_TIME"] = "MONTHLY"
    frequency_data: Optional[FrequencyDataIn] = None
    category: Optional[str] = None


class PlannedExpenseCreate(BaseModel):
    label: str = Field(min_length=1)
    amount: float = Field(gt=0)
    date: ISODate
    category: Optional[str] = None
    spent: bool = False


class SpentUpdate(BaseModel):
    spent: bool


def _item_payload(row, today):
    item = normalize_recurring_row(row)
    payload = asdict(ItemDTO.from_recurring(item))
    next_due = next_due_date(item, today)
    payload["next_due_date"] = next_due.isoformat() if next_due else None
    return payload


# -------------------------
# RECURRING INCOMES / EXPENSES
# -------------------------

def _list_items(user_id, kind):
    conn = get_db()
    try:
        rows = get_recurring_items(conn, user_id, kind)
    finally:
        conn.close()

    today = date.today()
    items = [_item_payload(r, today) for r in rows]
    return {"count": len(items), "items": items}


def _create_item(user_id, kind, payload: RecurringItemCreate):
    frequency_data = payload.frequency_data.model_dump() if payload.frequency_data else None

    conn = get_db()
    try:
        new_id = add_recurring_item(
            conn, user_id, kind,
            label=payload.label.strip(),
            amount=payload.amount,
            day_of_month=payload.day_of_month,
            frequency=payload.frequency,
            frequency_data=dump_frequency_data(frequency_data),
            category=payload.category,
        )
    finally:
        conn.close()

    logging.info(f"{kind.capitalize()} created: {payload.label} for user {user_id}")
    return JSONResponse(status_code=201, content={"status": f"{kind} added", "id": new_id})


def _delete_item(user_id, kind, item_id):
    conn = get_db()
    try:
        delete_recurring_item(conn, user_id, kind, item_id)
    except ValueError as e:
        return JSONResponse(status_code=404, content={"error": str(e)})
    finally:
        conn.close()
    return {"status": f"{kind} deleted", "id": item_id}


@router.get("/incomes")
def list_incomes(user_id: str = Query(...)):
    return _list_items(user_id, ItemKind.INCOME)


@router.post("/incomes")
def create_income(income: RecurringItemCreate, user_id: str = Query(...)):
    return _create_item(user_id, ItemKind.INCOME, income)


@router.delete("/incomes/{item_id}")
def delete_income(item_id: int, user_id: str = Query(...)):
    return _delete_item(user_id, ItemKind.INCOME, item_id)


@router.get("/expenses")
def list_expenses(user_id: str = Query(...)):
    return _list_items(user_id, ItemKind.EXPENSE)


@router.post("/expenses")
def create_expense(expense: RecurringItemCreate, user_id: str = Query(...)):
    return _create_item(user_id, ItemKind.EXPENSE, expense)


@router.delete("/expenses/{item_id}")
def delete_expense(item_id: int, user_id: str = Query(...)):
    return _delete_item(user_id, ItemKind.EXPENSE, item_id)


# -------------------------
# PLANNED EXPENSES
# -------------------------

@router.get("/planned-expenses")
def list_planned_expenses(user_id: str = Query(...), active_only: bool = Query(False)):
    """
    List planned expenses by date. ``active_only`` hides unspent ones
    whose date has passed.
    """
    conn = get_db()
    try:
        rows = get_planned_expenses(conn, user_id)
    finally:
        conn.close()

    expenses = [normalize_planned_row(r) for r in rows]
    stats = planned_statistics(expenses)
    if active_only:
        expenses = filter_active_or_spent(expenses, date.today())

    return {
        "count": len(expenses),
        "items": [asdict(ItemDTO.from_planned(e)) for e in expenses],
        "statistics": {
            key: {"count": value["count"], "amount": round_money(value["amount"])}
            for key, value in stats.items()
        },
    }


@router.post("/planned-expenses")
def create_planned_expense(expense: PlannedExpenseCreate, user_id: str = Query(...)):
    conn = get_db()
    try:
        new_id = add_planned_expense(
            conn, user_id,
            label=expense.label.strip(),
            amount=expense.amount,
            date=expense.date,
            category=expense.category,
            spent=expense.spent,
        )
    finally:
        conn.close()

    return JSONResponse(status_code=201, content={"status": "planned expense added", "id": new_id})


@router.put("/planned-expenses/{expense_id}/spent")
def mark_planned_expense(expense_id: int, update: SpentUpdate, user_id: str = Query(...)):
    conn = get_db()
    try:
        set_spent(conn, user_id, expense_id, update.spent)
    except ValueError as e:
        return JSONResponse(status_code=404, content={"error": str(e)})
    finally:
        conn.close()

    return {"id": expense_id, "spent": update.spent, "status": "updated"}


@router.delete("/planned-expenses/{expense_id}")
def remove_planned_expense(expense_id: int, user_id: str = Query(...)):
    conn = get_db()
    try:
        delete_planned_expense(conn, user_id, expense_id)
    except ValueError as e:
        return JSONResponse(status_code=404, content={"error": str(e)})
    finally:
        conn.close()

    return {"status": "planned expense deleted", "id": expense_id}

import logging
import os
from dataclasses import asdict
from datetime import date
from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from db import get_db
from repositories.settings_repository import update_settings
from services import budget_service
from services.balance_dto import (
    BalanceResponseDTO,
    PastTransactionsDTO,
    ProjectionResponseDTO,
)
from utils.money import round_money

DEFAULT_PROJECTION_DAYS = int(os.getenv("DEFAULT_PROJECTION_DAYS", "30"))
MAX_PROJECTION_DAYS = int(os.getenv("MAX_PROJECTION_DAYS", "366"))

router = APIRouter(prefix="/balance")


class BalanceAdjustment(BaseModel):
    amount: float
    description: str
    type: Optional[str] = None


class InitialBalanceUpdate(BaseModel):
    initial_balance: float
    month_start_day: Optional[int] = None


def _parse_as_of(as_of_date):
    """Return (date, None) or (None, error response)."""
    if not as_of_date:
        return date.today(), None
    try:
        return date.fromisoformat(as_of_date), None
    except ValueError:
        return None, JSONResponse(status_code=400, content={"error": "Invalid date format. Use YYYY-MM-DD."})


def _server_error(where, e):
    logging.error(f"Error in {where}: {e}")
    return JSONResponse(status_code=500, content={"error": str(e)})


def _round_alerts(alerts):
    return [
        {**alert, "amount": round_money(alert["amount"])} if "amount" in alert else alert
        for alert in alerts
    ]


@router.get("")
def get_balance(user_id: str = Query(...), as_of_date: Optional[str] = Query(None)):
    """
    Current balance as of ``as_of_date`` (defaults to today).
    """
    today, error = _parse_as_of(as_of_date)
    if error:
        return error

    try:
        report = budget_service.get_balance(user_id, today)
        return asdict(BalanceResponseDTO.from_report(report))
    except Exception as e:
        return _server_error("get_balance", e)


@router.get("/projection")
def get_projection(
    user_id: str = Query(...),
    days: int = Query(DEFAULT_PROJECTION_DAYS, ge=1),
    as_of_date: Optional[str] = Query(None),
):
    """
    Return a deterministic day-by-day projection of the balance.

    Query Parameters:
        days (optional): Number of points, today included. Capped at MAX_PROJECTION_DAYS.
        as_of_date (optional): Reference date in ISO format (YYYY-MM-DD).

    The first point always equals the balance returned by ``GET /balance``
    for the same reference date.
    """
    today, error = _parse_as_of(as_of_date)
    if error:
        return error

    try:
        projection = budget_service.get_projection(user_id, today, min(days, MAX_PROJECTION_DAYS))
        return asdict(ProjectionResponseDTO.from_projection(projection))
    except Exception as e:
        return _server_error("get_projection", e)


@router.get("/past-transactions")
def get_past_transactions(user_id: str = Query(...), as_of_date: Optional[str] = Query(None)):
    today, error = _parse_as_of(as_of_date)
    if error:
        return error

    try:
        groups = budget_service.get_past_transactions(user_id, today)
        return asdict(PastTransactionsDTO.from_groups(today, groups))
    except Exception as e:
        return _server_error("get_past_transactions", e)


@router.get("/alerts")
def get_alerts(
    user_id: str = Query(...),
    days: int = Query(DEFAULT_PROJECTION_DAYS, ge=1),
    as_of_date: Optional[str] = Query(None),
):
    today, error = _parse_as_of(as_of_date)
    if error:
        return error

    try:
        alerts = budget_service.get_alerts(user_id, today, min(days, MAX_PROJECTION_DAYS))
        return {"count": len(alerts), "alerts": _round_alerts(alerts)}
    except Exception as e:
        return _server_error("get_alerts", e)


@router.get("/reset-status")
def get_reset_status(user_id: str = Query(...), as_of_date: Optional[str] = Query(None)):
    today, error = _parse_as_of(as_of_date)
    if error:
        return error

    try:
        return budget_service.get_monthly_reset_status(user_id, today)
    except Exception as e:
        return _server_error("get_reset_status", e)


@router.get("/summary")
def get_summary(user_id: str = Query(...), as_of_date: Optional[str] = Query(None)):
    today, error = _parse_as_of(as_of_date)
    if error:
        return error

    try:
        summary = budget_service.get_summary(user_id, today, DEFAULT_PROJECTION_DAYS)
        return {
            "balance": asdict(BalanceResponseDTO.from_report(summary["report"])),
            "alerts": _round_alerts(summary["alerts"]),
            "calculated_at": summary["calculated_at"],
        }
    except Exception as e:
        return _server_error("get_summary", e)


@router.post("/adjust")
def adjust_balance(adjustment: BalanceAdjustment, user_id: str = Query(...)):
    """
    Add (positive amount) or subtract (negative amount) a manual correction.
    """
    if not adjustment.description.strip():
        return JSONResponse(status_code=400, content={"error": "Description is required"})

    try:
        report = budget_service.adjust_balance(
            user_id, adjustment.amount, adjustment.description.strip(), adjustment.type
        )
        return asdict(BalanceResponseDTO.from_report(report))
    except Exception as e:
        return _server_error("adjust_balance", e)


@router.put("/initial")
def set_initial_balance(update: InitialBalanceUpdate, user_id: str = Query(...)):
    if update.month_start_day is not None and not 1 <= update.month_start_day <= 28:
        return JSONResponse(status_code=400, content={"error": "month_start_day must be between 1 and 28"})

    conn = get_db()
    try:
        settings = update_settings(conn, user_id, update.initial_balance, update.month_start_day)
    except Exception as e:
        return _server_error("set_initial_balance", e)
    finally:
        conn.close()

    return {
        "user_id": settings["user_id"],
        "initial_balance": round_money(settings["initial_balance"]),
        "month_start_day": settings["month_start_day"],
        "currency": settings["currency"],
    }

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.api.auth_deps import get_current_user
from app.api.deps import Store
from app.api.errors import to_http
from app.infra.ledger_store import SqlLedgerStore
from app.infra.models import UserORM
from app.schemas.reports import MonthlyReportOut, MonthSummaryOut, YearsOut
from app.services.errors import LedgerError
from app.services.summary_service import summarize_month, summarize_year, transaction_years

router = APIRouter()


@router.get("/month", response_model=MonthlyReportOut)
def month_report(
    month: int = Query(...),
    year: int = Query(...),
    store: SqlLedgerStore = Store,
    user: UserORM = Depends(get_current_user),
):
    try:
        report = summarize_month(store, user.id, month, year)
    except LedgerError as e:
        raise to_http(e)
    return MonthlyReportOut.model_validate(report)


@router.get("/year", response_model=list[MonthSummaryOut])
def year_report(
    year: int = Query(...),
    store: SqlLedgerStore = Store,
    user: UserORM = Depends(get_current_user),
):
    try:
        summary = summarize_year(store, user.id, year)
    except LedgerError as e:
        raise to_http(e)
    return [MonthSummaryOut.model_validate(m) for m in summary]


@router.get("/years", response_model=YearsOut)
def years(
    store: SqlLedgerStore = Store,
    user: UserORM = Depends(get_current_user),
):
    try:
        anos = transaction_years(store, user.id)
    except LedgerError as e:
        raise to_http(e)
    return YearsOut(anos=anos)

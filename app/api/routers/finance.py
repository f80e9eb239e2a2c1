from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.auth_deps import get_current_user
from app.api.deps import Store
from app.api.errors import to_http
from app.infra.ledger_store import SqlLedgerStore
from app.infra.models import UserORM
from app.schemas.finance import (
    ExpenseCreate,
    ExpenseInstallmentsOut,
    ExpenseOut,
    IncomeCreate,
    IncomeOut,
)
from app.services.errors import LedgerError
from app.services.expenses_service import add_expense, add_income, get_expense_installments

router = APIRouter()


@router.post("/expenses", response_model=ExpenseOut, status_code=201)
def create_expense(
    payload: ExpenseCreate,
    store: SqlLedgerStore = Store,
    user: UserORM = Depends(get_current_user),
):
    details = payload.credit_card_details
    try:
        expense = add_expense(
            store,
            user_id=user.id,
            category=payload.category,
            value=payload.value,
            payment_type=payload.payment_type,
            date=payload.date,
            description=payload.description,
            installments=details.installments if details else None,
            installment_value=details.installment_value if details else None,
        )
    except LedgerError as e:
        raise to_http(e)
    return expense


@router.post("/incomes", response_model=IncomeOut, status_code=201)
def create_income(
    payload: IncomeCreate,
    store: SqlLedgerStore = Store,
    user: UserORM = Depends(get_current_user),
):
    try:
        income = add_income(
            store,
            user_id=user.id,
            value=payload.value,
            date=payload.date,
            description=payload.description,
        )
    except LedgerError as e:
        raise to_http(e)
    return income


@router.get("/expenses/{expense_id}/installments", response_model=ExpenseInstallmentsOut)
def list_expense_installments(
    expense_id: int,
    store: SqlLedgerStore = Store,
    user: UserORM = Depends(get_current_user),
):
    try:
        result = get_expense_installments(store, expense_id, user.id)
    except LedgerError as e:
        raise to_http(e)
    return ExpenseInstallmentsOut.model_validate(result)

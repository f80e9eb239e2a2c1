from __future__ import annotations
from fastapi import APIRouter, Depends

from app.api.auth_deps import get_current_user
from app.api.deps import Store
from app.api.errors import to_http
from app.infra.ledger_store import SqlLedgerStore
from app.infra.models import UserORM
from app.schemas.installments import InstallmentPaidOut
from app.services.errors import LedgerError
from app.services.installments_service import pay_installment

router = APIRouter()


@router.post("/{inst_id}/pay", response_model=InstallmentPaidOut)
def pay(
    inst_id: int,
    store: SqlLedgerStore = Store,
    user: UserORM = Depends(get_current_user),
):
    try:
        paid = pay_installment(store, inst_id, user.id)
    except LedgerError as e:
        raise to_http(e)
    return InstallmentPaidOut.model_validate(paid)

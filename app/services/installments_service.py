from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from dateutil.relativedelta import relativedelta

from app.infra.ledger_store import LedgerStore
from app.infra.models import InstallmentORM, InstallmentStatus
from app.services.errors import AlreadyPaid, Forbidden, NotFound, ValidationError

logger = logging.getLogger(__name__)


# helpers
def _today_local() -> date:
    return datetime.now().date()


def _add_months(d: date, months: int) -> date:
    # relativedelta ajusta o dia para o último dia válido do mês (31/01 + 1 mês = 28 ou 29/02)
    return d + relativedelta(months=months)


def _quantize_money(v: Decimal) -> Decimal:
    return v.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def _to_decimal(v, field: str) -> Decimal:
    if isinstance(v, bool):
        raise ValidationError(f"{field} inválido.")
    try:
        d = Decimal(str(v))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"{field} inválido.")
    # NaN e Infinity não são valores monetários
    if not d.is_finite():
        raise ValidationError(f"{field} inválido.")
    return d


def _to_money(v, field: str) -> Decimal:
    d = _to_decimal(v, field)
    try:
        return _quantize_money(d)
    except InvalidOperation:
        raise ValidationError(f"{field} inválido.")


def generate_installments(
    expense_id: Optional[int],
    purchase_date: date,
    installment_count: int,
    installment_value: Decimal,
) -> list[InstallmentORM]:
    """
    Monta (sem persistir) as parcelas de uma compra no crédito.

    A parcela i vence i meses depois da compra: a primeira cai no mês seguinte,
    nunca no próprio mês da compra. Cada vencimento é calculado a partir da data
    da compra, então 31/01 gera 29/02, 31/03, 30/04 (e não 29/02, 29/03, ...).
    """
    if isinstance(installment_count, bool) or not isinstance(installment_count, int):
        raise ValidationError("Quantidade de parcelas inválida.")
    if installment_count < 1:
        raise ValidationError("Quantidade de parcelas deve ser >= 1.")

    # valida já arredondado: 0.004 vira 0.00 ao gravar
    value = _to_money(installment_value, "Valor da parcela")
    if value <= 0:
        raise ValidationError("Valor da parcela deve ser maior que zero.")

    installments = []
    for n in range(1, installment_count + 1):
        installments.append(
            InstallmentORM(
                expense_id=expense_id,
                parcela_number=n,
                value=value,
                due_date=_add_months(purchase_date, n),
                payment_date=None,
                status=InstallmentStatus.PENDENTE,
            )
        )
    return installments


@dataclass
class PaidInstallment:
    id: int
    expense_id: int
    parcela_number: int
    value: Decimal
    due_date: date
    payment_date: date
    status: InstallmentStatus
    category: str
    expense_value: Decimal
    description: Optional[str]


def payment_status_for(due_date: date, today: date) -> InstallmentStatus:
    if (today.year, today.month) == (due_date.year, due_date.month):
        return InstallmentStatus.PAGO
    return InstallmentStatus.PAGOANTECIPADO


def pay_installment(
    store: LedgerStore,
    installment_id: int,
    requesting_user_id: int,
    *,
    today: Optional[date] = None,
) -> PaidInstallment:
    if not store.get_user(requesting_user_id):
        raise NotFound("Usuário não encontrado.")

    inst = store.find_installment(installment_id)
    if not inst:
        raise NotFound("Parcela não encontrada.")

    expense = inst.expense
    if expense.user_id != requesting_user_id:
        logger.warning(
            "pay: parcela %s não pertence ao usuário %s", installment_id, requesting_user_id
        )
        raise Forbidden("Esta parcela não pertence ao usuário.")

    if inst.status in (InstallmentStatus.PAGO, InstallmentStatus.PAGOANTECIPADO):
        raise AlreadyPaid("Esta parcela já está paga.")

    paid_on = today or _today_local()
    status = payment_status_for(inst.due_date, paid_on)

    # update condicional: se outra requisição pagou antes, nenhuma linha muda
    if not store.update_installment_status(inst.id, status, paid_on):
        raise AlreadyPaid("Esta parcela já está paga.")

    inst.status = status
    inst.payment_date = paid_on

    logger.info(
        "pay: parcela %s (despesa %s) -> %s em %s",
        inst.id, expense.id, status.value, paid_on.isoformat(),
    )

    return PaidInstallment(
        id=inst.id,
        expense_id=expense.id,
        parcela_number=inst.parcela_number,
        value=inst.value,
        due_date=inst.due_date,
        payment_date=paid_on,
        status=status,
        category=expense.category,
        expense_value=expense.value,
        description=expense.description,
    )

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from typing import Optional

from app.infra.ledger_store import LedgerStore
from app.infra.models import (
    CategoryType,
    ExpenseORM,
    IncomeORM,
    InstallmentORM,
    InstallmentStatus,
    PaymentType,
    TransactionType,
)
from app.services.errors import Forbidden, NotFound, ValidationError
from app.services.installments_service import _quantize_money, _to_money, generate_installments

logger = logging.getLogger(__name__)


def _parse_date(v, field: str = "date") -> date:
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    if isinstance(v, str) and v.strip():
        try:
            return date.fromisoformat(v.strip()[:10])
        except ValueError:
            pass
    raise ValidationError(f"{field} inválida.")


def _parse_payment_type(v) -> PaymentType:
    if isinstance(v, PaymentType):
        return v
    try:
        return PaymentType(str(v).strip().upper())
    except ValueError:
        raise ValidationError("paymentType inválido (CREDITO|PIX|DEBITO|DINHEIRO).")


def _credit_description(description: Optional[str], installments: int) -> str:
    prefix = f"{description} - " if description else ""
    if installments > 1:
        return f"{prefix}Compra parcelada em {installments}x no crédito"
    return f"{prefix}Compra à vista no crédito"


def add_expense(
    store: LedgerStore,
    *,
    user_id: int,
    category: str,
    value,
    payment_type,
    date,
    description: Optional[str] = None,
    installments: Optional[int] = None,
    installment_value=None,
) -> ExpenseORM:
    category_name = (category or "").strip()
    if not user_id or not category_name or value is None or not date or not payment_type:
        raise ValidationError("Campos obrigatórios faltando.")

    if not store.get_user(user_id):
        raise NotFound("Usuário não encontrado.")

    amount = _to_money(value, "value")
    if amount <= 0:
        raise ValidationError("value deve ser maior que zero.")

    purchase_date = _parse_date(date)
    ptype = _parse_payment_type(payment_type)
    description = (description or "").strip() or None

    generated = None
    if ptype == PaymentType.CREDITO:
        count = installments if installments is not None else 1
        per = installment_value if installment_value is not None else amount
        # valida o parcelamento antes de gravar qualquer coisa
        generated = generate_installments(None, purchase_date, count, per)

    # categoria inexistente é criada na hora
    store.find_or_create_category(user_id, category_name, CategoryType.DESPESA)

    if generated is None:
        expense = store.create_expense(
            user_id=user_id,
            date=purchase_date,
            value=amount,
            category=category_name,
            payment_type=ptype,
            transaction_type=TransactionType.A_VISTA,
            description=description,
        )
        logger.info("expense: %s registrada (usuário %s, %s)", expense.id, user_id, ptype.value)
        return expense

    count = len(generated)
    expense = store.create_expense(
        user_id=user_id,
        date=purchase_date,
        value=amount,
        category=category_name,
        payment_type=PaymentType.CREDITO,
        transaction_type=TransactionType.PARCELADO if count > 1 else TransactionType.A_VISTA,
        description=_credit_description(description, count),
    )
    for inst in generated:
        inst.expense_id = expense.id
    store.create_installments(expense, generated)

    logger.info(
        "expense: %s registrada no crédito em %sx (usuário %s)", expense.id, count, user_id
    )
    return expense


def add_income(
    store: LedgerStore,
    *,
    user_id: int,
    value,
    date,
    description: Optional[str] = None,
) -> IncomeORM:
    if not user_id or value is None or not date:
        raise ValidationError("Campos obrigatórios faltando.")

    if not store.get_user(user_id):
        raise NotFound("Usuário não encontrado.")

    amount = _to_money(value, "value")
    if amount <= 0:
        raise ValidationError("value deve ser maior que zero.")

    income = store.create_income(
        user_id=user_id,
        date=_parse_date(date),
        value=amount,
        description=(description or "").strip() or None,
    )
    logger.info("income: %s registrada (usuário %s)", income.id, user_id)
    return income


@dataclass
class ExpenseInstallments:
    expense_id: int
    category: str
    payment_type: PaymentType
    date: date
    total_purchase: Decimal
    pending_sum: Decimal
    installments: list[InstallmentORM]


def get_expense_installments(
    store: LedgerStore, expense_id: int, user_id: int
) -> ExpenseInstallments:
    if isinstance(expense_id, bool) or not isinstance(expense_id, int) or expense_id < 1:
        raise ValidationError("ID da despesa inválido.")

    expense = store.find_expense(expense_id)
    if not expense:
        raise NotFound("Despesa não encontrada.")
    if expense.user_id != user_id:
        raise Forbidden("Esta despesa não pertence ao usuário.")
    if not expense.installments:
        raise NotFound("Nenhuma parcela encontrada para esta despesa.")

    pending = sum(
        (i.value for i in expense.installments if i.status == InstallmentStatus.PENDENTE),
        Decimal("0"),
    )

    return ExpenseInstallments(
        expense_id=expense.id,
        category=expense.category,
        payment_type=expense.payment_type,
        date=expense.date,
        total_purchase=_quantize_money(expense.value),
        pending_sum=_quantize_money(pending),
        installments=sorted(expense.installments, key=lambda i: i.parcela_number),
    )

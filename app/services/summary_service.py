from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterator, Optional, Sequence

from app.infra.ledger_store import LedgerStore
from app.infra.models import (
    ExpenseORM,
    IncomeORM,
    InstallmentORM,
    InstallmentStatus,
    PaymentType,
)
from app.services.errors import NotFound, ValidationError
from app.services.installments_service import _quantize_money as _money

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def _as_int(v, field_name: str) -> int:
    if isinstance(v, bool):
        raise ValidationError(f"{field_name} inválido.")
    if isinstance(v, int):
        return v
    if isinstance(v, str) and v.strip().lstrip("-").isdigit():
        return int(v.strip())
    raise ValidationError(f"{field_name} inválido.")


def _validate_user_and_year(user_id, year) -> tuple[int, int]:
    uid = _as_int(user_id, "userId")
    if uid < 1:
        raise ValidationError("userId inválido.")
    y = _as_int(year, "Ano")
    if y < 1 or y > 9999:
        raise ValidationError("Ano inválido.")
    return uid, y


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def _in_range(d: Optional[date], start: date, end: date) -> bool:
    return d is not None and start <= d <= end


# regras de atribuição de parcela a um mês
def installment_due_in(inst: InstallmentORM, start: date, end: date) -> bool:
    return _in_range(inst.due_date, start, end)


def installment_paid_early_in(inst: InstallmentORM, start: date, end: date) -> bool:
    return inst.status == InstallmentStatus.PAGOANTECIPADO and _in_range(inst.payment_date, start, end)


def installment_counts_in(inst: InstallmentORM, start: date, end: date) -> bool:
    """
    PAGOANTECIPADO conta no mês em que foi pago; PAGO e PENDENTE contam no mês
    de vencimento. Como a regra depende só do status, a parcela cai em um único mês.
    """
    if inst.status == InstallmentStatus.PAGOANTECIPADO:
        return _in_range(inst.payment_date, start, end)
    return installment_due_in(inst, start, end)


def expense_amount_in(expense: ExpenseORM, start: date, end: date) -> Decimal:
    if expense.payment_type != PaymentType.CREDITO or not expense.installments:
        return expense.value if _in_range(expense.date, start, end) else ZERO

    return sum(
        (i.value for i in expense.installments if installment_counts_in(i, start, end)),
        ZERO,
    )


def _income_total(incomes: Sequence[IncomeORM], start: date, end: date) -> Decimal:
    return sum((r.value for r in incomes if _in_range(r.date, start, end)), ZERO)


# resultados
@dataclass
class InstallmentDetail:
    id: int
    parcela_number: int
    value: Decimal
    due_date: date
    payment_date: Optional[date]
    status: InstallmentStatus
    antecipada_deste_mes: bool
    vence_neste_mes: bool


@dataclass
class ExpenseDetail:
    id: int
    date: date
    value: Decimal
    category: str
    payment_type: PaymentType
    transaction_type: str
    description: Optional[str]
    parcelas: list[InstallmentDetail]
    total_parcelas: int
    compra_paga: bool


@dataclass
class CreditPurchaseSummary:
    id: int
    value: Decimal
    total_parcelas: int
    compra_paga: bool


@dataclass
class IncomeDetail:
    id: int
    date: date
    value: Decimal
    description: Optional[str]


@dataclass
class MonthlyReport:
    month: int
    year: int
    total_receitas: Decimal
    total_despesas: Decimal
    saldo: Decimal
    total_credito: Decimal
    total_credito_usado: Decimal
    total_credito_pago: Decimal
    total_credito_a_pagar: Decimal
    total_pix: Decimal
    total_debito: Decimal
    total_dinheiro: Decimal
    despesas_credito_resumo: list[CreditPurchaseSummary] = field(default_factory=list)
    receitas: list[IncomeDetail] = field(default_factory=list)
    despesas: list[ExpenseDetail] = field(default_factory=list)


@dataclass
class MonthSummary:
    month: int
    receita_total: Decimal
    despesa_total: Decimal
    saldo: Decimal


def _all_paid(expense: ExpenseORM) -> bool:
    return bool(expense.installments) and all(
        i.status in (InstallmentStatus.PAGO, InstallmentStatus.PAGOANTECIPADO)
        for i in expense.installments
    )


def _expense_detail(expense: ExpenseORM, start: date, end: date) -> ExpenseDetail:
    parcelas = [
        InstallmentDetail(
            id=i.id,
            parcela_number=i.parcela_number,
            value=_money(i.value),
            due_date=i.due_date,
            payment_date=i.payment_date,
            status=i.status,
            antecipada_deste_mes=installment_paid_early_in(i, start, end),
            vence_neste_mes=installment_due_in(i, start, end),
        )
        for i in sorted(expense.installments, key=lambda x: x.parcela_number)
    ]
    return ExpenseDetail(
        id=expense.id,
        date=expense.date,
        value=_money(expense.value),
        category=expense.category,
        payment_type=expense.payment_type,
        transaction_type=expense.transaction_type.value,
        description=expense.description,
        parcelas=parcelas,
        total_parcelas=len(parcelas) or 1,
        compra_paga=_all_paid(expense),
    )


def summarize_month(store: LedgerStore, user_id, month, year) -> MonthlyReport:
    uid, y = _validate_user_and_year(user_id, year)
    m = _as_int(month, "Mês")
    if m < 1 or m > 12:
        raise ValidationError("Mês ou ano inválidos.")

    if not store.get_user(uid):
        raise NotFound("Usuário não encontrado.")

    start, end = month_bounds(y, m)
    incomes = store.find_incomes_in_range(uid, start, end)
    expenses = store.find_expenses_in_range(uid, start, end)

    total_receitas = _income_total(incomes, start, end)
    total_despesas = ZERO
    total_credito = ZERO
    credito_usado = ZERO
    credito_pago = ZERO
    credito_a_pagar = ZERO
    by_type = {PaymentType.PIX: ZERO, PaymentType.DEBITO: ZERO, PaymentType.DINHEIRO: ZERO}
    credit_purchases: list[CreditPurchaseSummary] = []

    for expense in expenses:
        amount = expense_amount_in(expense, start, end)
        total_despesas += amount
        dated_in_month = _in_range(expense.date, start, end)

        if expense.payment_type != PaymentType.CREDITO:
            if dated_in_month:
                by_type[expense.payment_type] += expense.value
            continue

        total_credito += amount
        if dated_in_month:
            credito_usado += expense.value
            credit_purchases.append(
                CreditPurchaseSummary(
                    id=expense.id,
                    value=_money(expense.value),
                    total_parcelas=len(expense.installments) or 1,
                    compra_paga=_all_paid(expense),
                )
            )

        for inst in expense.installments:
            if inst.status == InstallmentStatus.PAGO and installment_due_in(inst, start, end):
                credito_pago += inst.value
            elif installment_paid_early_in(inst, start, end):
                credito_pago += inst.value
            elif inst.status == InstallmentStatus.PENDENTE and installment_due_in(inst, start, end):
                credito_a_pagar += inst.value

    return MonthlyReport(
        month=m,
        year=y,
        total_receitas=_money(total_receitas),
        total_despesas=_money(total_despesas),
        saldo=_money(total_receitas - total_despesas),
        total_credito=_money(total_credito),
        total_credito_usado=_money(credito_usado),
        total_credito_pago=_money(credito_pago),
        total_credito_a_pagar=_money(credito_a_pagar),
        total_pix=_money(by_type[PaymentType.PIX]),
        total_debito=_money(by_type[PaymentType.DEBITO]),
        total_dinheiro=_money(by_type[PaymentType.DINHEIRO]),
        despesas_credito_resumo=credit_purchases,
        receitas=[
            IncomeDetail(id=r.id, date=r.date, value=_money(r.value), description=r.description)
            for r in incomes
        ],
        despesas=[_expense_detail(e, start, end) for e in expenses],
    )


class YearSummary:
    """
    Resumo mês a mês de um ano. Os dados já estão carregados; cada iteração
    recalcula a partir deles, então pode ser percorrido quantas vezes precisar.
    Meses sem receita e sem despesa ficam de fora.
    """

    def __init__(self, year: int, incomes: Sequence[IncomeORM], expenses: Sequence[ExpenseORM]):
        self.year = year
        self._incomes = list(incomes)
        self._expenses = list(expenses)

    def __iter__(self) -> Iterator[MonthSummary]:
        for m in range(1, 13):
            start, end = month_bounds(self.year, m)
            receita = _income_total(self._incomes, start, end)
            despesa = sum((expense_amount_in(e, start, end) for e in self._expenses), ZERO)

            if receita == 0 and despesa == 0:
                continue

            yield MonthSummary(
                month=m,
                receita_total=_money(receita),
                despesa_total=_money(despesa),
                saldo=_money(receita - despesa),
            )


def summarize_year(store: LedgerStore, user_id, year) -> YearSummary:
    uid, y = _validate_user_and_year(user_id, year)

    if not store.get_user(uid):
        raise NotFound("Usuário não encontrado.")

    start, end = date(y, 1, 1), date(y, 12, 31)
    incomes = store.find_incomes_in_range(uid, start, end)
    expenses = store.find_expenses_in_range(uid, start, end)
    return YearSummary(y, incomes, expenses)


def transaction_years(store: LedgerStore, user_id) -> list[int]:
    uid = _as_int(user_id, "userId")
    if uid < 1:
        raise ValidationError("userId inválido.")
    if not store.get_user(uid):
        raise NotFound("Usuário não encontrado.")
    return store.transaction_years(uid)

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict


class InstallmentDetailOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    parcela_number: int
    value: Decimal
    due_date: date
    payment_date: Optional[date]
    status: str
    antecipada_deste_mes: bool
    vence_neste_mes: bool


class ExpenseDetailOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    date: date
    value: Decimal
    category: str
    payment_type: str
    transaction_type: str
    description: Optional[str]
    parcelas: list[InstallmentDetailOut]
    total_parcelas: int
    compra_paga: bool


class CreditPurchaseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    value: Decimal
    total_parcelas: int
    compra_paga: bool


class IncomeDetailOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    date: date
    value: Decimal
    description: Optional[str]


class MonthlyReportOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

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
    despesas_credito_resumo: list[CreditPurchaseOut]
    receitas: list[IncomeDetailOut]
    despesas: list[ExpenseDetailOut]


class MonthSummaryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    month: int
    receita_total: Decimal
    despesa_total: Decimal
    saldo: Decimal


class YearsOut(BaseModel):
    anos: list[int]

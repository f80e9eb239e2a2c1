from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict

from app.schemas.installments import InstallmentOut


class CreditCardDetails(BaseModel):
    installments: int = Field(default=1, ge=1, le=120)
    installment_value: Optional[Decimal] = Field(default=None, gt=0)


class ExpenseCreate(BaseModel):
    category: str = Field(min_length=1, max_length=80)
    value: Decimal = Field(gt=0)
    description: Optional[str] = Field(default=None, max_length=500)
    payment_type: str  # CREDITO, PIX, DEBITO, DINHEIRO
    date: date
    credit_card_details: Optional[CreditCardDetails] = None


class ExpenseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    date: date
    value: Decimal
    category: str
    payment_type: str
    transaction_type: str
    description: Optional[str]
    created_at: datetime

    installments: list[InstallmentOut] = []


class IncomeCreate(BaseModel):
    value: Decimal = Field(gt=0)
    date: date
    description: Optional[str] = Field(default=None, max_length=200)


class IncomeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    date: date
    value: Decimal
    description: Optional[str]
    created_at: datetime


class ExpenseInstallmentsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    expense_id: int
    category: str
    payment_type: str
    date: date
    total_purchase: Decimal
    pending_sum: Decimal
    installments: list[InstallmentOut]

from __future__ import annotations
from pydantic import BaseModel, ConfigDict
from typing import Optional
from decimal import Decimal
from datetime import date

class InstallmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    expense_id: int
    parcela_number: int
    value: Decimal
    due_date: date
    payment_date: Optional[date]
    status: str

class InstallmentPaidOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    expense_id: int
    parcela_number: int
    value: Decimal
    due_date: date
    payment_date: date
    status: str
    # dados da despesa dona da parcela
    category: str
    expense_value: Decimal
    description: Optional[str]

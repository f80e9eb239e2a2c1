from __future__ import annotations

import enum
from datetime import datetime, date
from decimal import Decimal
from typing import Optional, List

from sqlalchemy import (
    String, Integer, DateTime, Date, Numeric, ForeignKey, Text,
    Enum as SAEnum, UniqueConstraint, CheckConstraint, Index, func
)

from sqlalchemy.orm import (
    DeclarativeBase, Mapped, mapped_column, relationship
)


# base
class Base(DeclarativeBase):
    pass

# enums = status
class UserStatus(str, enum.Enum):
    VERIFICACAOPENDENTE = "VERIFICACAOPENDENTE"
    LIBERADO = "LIBERADO"
    RECUSADO = "RECUSADO"

class CategoryType(str, enum.Enum):
    DESPESA = "DESPESA"
    RECEITA = "RECEITA"

class PaymentType(str, enum.Enum):
    CREDITO = "CREDITO"
    PIX = "PIX"
    DEBITO = "DEBITO"
    DINHEIRO = "DINHEIRO"

class TransactionType(str, enum.Enum):
    A_VISTA = "À Vista"
    PARCELADO = "PARCELADO"

class InstallmentStatus(str, enum.Enum):
    PENDENTE = "PENDENTE"
    PAGO = "PAGO"
    PAGOANTECIPADO = "PAGOANTECIPADO"


def _enum_values(enum_cls) -> list[str]:
    return [m.value for m in enum_cls]


# models
class UserORM(Base):
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    email: Mapped[str] = mapped_column(String(160), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    status: Mapped[UserStatus] = mapped_column(
        SAEnum(UserStatus, name="user_status"),
        nullable=False,
        default=UserStatus.VERIFICACAOPENDENTE,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    categories: Mapped[List["CategoryORM"]] = relationship(back_populates="user")
    expenses: Mapped[List["ExpenseORM"]] = relationship(back_populates="user")
    incomes: Mapped[List["IncomeORM"]] = relationship(back_populates="user")


class CategoryORM(Base):
    __tablename__ = "categories"
    __table_args__ = (
        UniqueConstraint("user_id", "name", "type", name="uq_categories_user_name_type"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(80), nullable=False)

    type: Mapped[CategoryType] = mapped_column(
        SAEnum(CategoryType, name="category_type"),
        nullable=False,
        default=CategoryType.DESPESA,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    user: Mapped["UserORM"] = relationship(back_populates="categories")


class ExpenseORM(Base):
    __tablename__ = "expenses"
    __table_args__ = (
        Index("ix_expenses_user_date", "user_id", "date"),
        Index("ix_expenses_payment_type", "payment_type"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)

    date: Mapped[date] = mapped_column(Date, nullable=False)
    value: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    # nome da categoria (snapshot), a tabela categories guarda o cadastro
    category: Mapped[str] = mapped_column(String(80), nullable=False)

    payment_type: Mapped[PaymentType] = mapped_column(
        SAEnum(PaymentType, name="payment_type"),
        nullable=False,
    )

    # "À Vista" é gravado pelo valor, não pelo nome do membro
    transaction_type: Mapped[TransactionType] = mapped_column(
        SAEnum(TransactionType, name="transaction_type", values_callable=_enum_values),
        nullable=False,
        default=TransactionType.A_VISTA,
    )

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    user: Mapped["UserORM"] = relationship(back_populates="expenses")

    installments: Mapped[List["InstallmentORM"]] = relationship(
        back_populates="expense",
        cascade="all, delete-orphan",
        order_by="InstallmentORM.parcela_number",
    )


class InstallmentORM(Base):
    __tablename__ = "installments"
    __table_args__ = (
        UniqueConstraint("expense_id", "parcela_number", name="uq_installments_expense_number"),
        Index("ix_installments_due", "due_date", "status"),
        Index("ix_installments_payment", "payment_date", "status"),
        # payment_date preenchido <=> parcela paga
        CheckConstraint(
            "(status = 'PENDENTE' AND payment_date IS NULL)"
            " OR (status <> 'PENDENTE' AND payment_date IS NOT NULL)",
            name="ck_installments_payment_date_status",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    expense_id: Mapped[int] = mapped_column(ForeignKey("expenses.id"), nullable=False)

    parcela_number: Mapped[int] = mapped_column(Integer, nullable=False)  # 1..N
    value: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    payment_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    status: Mapped[InstallmentStatus] = mapped_column(
        SAEnum(InstallmentStatus, name="installment_status"),
        nullable=False,
        default=InstallmentStatus.PENDENTE,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    expense: Mapped["ExpenseORM"] = relationship(back_populates="installments")


class IncomeORM(Base):
    __tablename__ = "incomes"
    __table_args__ = (
        Index("ix_incomes_user_date", "user_id", "date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)

    date: Mapped[date] = mapped_column(Date, nullable=False)
    value: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    user: Mapped["UserORM"] = relationship(back_populates="incomes")

from __future__ import annotations

import functools
import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Protocol, Sequence

from sqlalchemy import and_, extract, or_, select, union, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from app.infra.models import (
    CategoryORM,
    CategoryType,
    ExpenseORM,
    IncomeORM,
    InstallmentORM,
    InstallmentStatus,
    PaymentType,
    TransactionType,
    UserORM,
)
from app.services.errors import StoreError

logger = logging.getLogger(__name__)


class LedgerStore(Protocol):
    def get_user(self, user_id: int) -> Optional[UserORM]: ...

    def find_expense(self, expense_id: int) -> Optional[ExpenseORM]: ...

    def find_expenses_in_range(self, user_id: int, start: date, end: date) -> Sequence[ExpenseORM]: ...

    def find_incomes_in_range(self, user_id: int, start: date, end: date) -> Sequence[IncomeORM]: ...

    def find_installment(self, installment_id: int) -> Optional[InstallmentORM]: ...

    def update_installment_status(
        self, installment_id: int, status: InstallmentStatus, payment_date: date
    ) -> bool: ...

    def create_expense(self, **fields) -> ExpenseORM: ...

    def create_installments(
        self, expense: ExpenseORM, installments: Iterable[InstallmentORM]
    ) -> list[InstallmentORM]: ...

    def create_income(self, **fields) -> IncomeORM: ...

    def find_or_create_category(self, user_id: int, name: str, type_: CategoryType) -> CategoryORM: ...

    def transaction_years(self, user_id: int) -> list[int]: ...


def _store_op(fn):
    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except SQLAlchemyError as e:
            logger.error("store: %s falhou: %s", fn.__name__, e.__class__.__name__)
            raise StoreError(f"Erro de banco em {fn.__name__}.") from e

    return wrapper


class SqlLedgerStore:
    """Implementação do LedgerStore sobre uma Session do SQLAlchemy.

    Não faz commit: a transação pertence a quem abriu a sessão (get_db).
    """

    def __init__(self, db: Session):
        self.db = db

    @_store_op
    def get_user(self, user_id: int) -> Optional[UserORM]:
        return self.db.get(UserORM, user_id)

    @_store_op
    def find_expense(self, expense_id: int) -> Optional[ExpenseORM]:
        stmt = (
            select(ExpenseORM)
            .options(selectinload(ExpenseORM.installments))
            .where(ExpenseORM.id == expense_id)
        )
        return self.db.execute(stmt).scalars().first()

    @_store_op
    def find_expenses_in_range(self, user_id: int, start: date, end: date) -> Sequence[ExpenseORM]:
        """
        Despesas do usuário que tocam o intervalo:
          - data da compra no intervalo, ou
          - alguma parcela vencendo no intervalo, ou
          - alguma parcela PAGOANTECIPADO paga no intervalo.
        Parcelas vêm carregadas (selectinload).
        """
        installment_hit = ExpenseORM.installments.any(
            or_(
                InstallmentORM.due_date.between(start, end),
                and_(
                    InstallmentORM.status == InstallmentStatus.PAGOANTECIPADO,
                    InstallmentORM.payment_date.between(start, end),
                ),
            )
        )
        stmt = (
            select(ExpenseORM)
            .options(selectinload(ExpenseORM.installments))
            .where(ExpenseORM.user_id == user_id)
            .where(or_(ExpenseORM.date.between(start, end), installment_hit))
            .order_by(ExpenseORM.date.asc(), ExpenseORM.id.asc())
        )
        return self.db.execute(stmt).scalars().all()

    @_store_op
    def find_incomes_in_range(self, user_id: int, start: date, end: date) -> Sequence[IncomeORM]:
        stmt = (
            select(IncomeORM)
            .where(IncomeORM.user_id == user_id)
            .where(IncomeORM.date.between(start, end))
            .order_by(IncomeORM.date.asc(), IncomeORM.id.asc())
        )
        return self.db.execute(stmt).scalars().all()

    @_store_op
    def find_installment(self, installment_id: int) -> Optional[InstallmentORM]:
        stmt = (
            select(InstallmentORM)
            .options(selectinload(InstallmentORM.expense))
            .where(InstallmentORM.id == installment_id)
        )
        return self.db.execute(stmt).scalars().first()

    @_store_op
    def update_installment_status(
        self, installment_id: int, status: InstallmentStatus, payment_date: date
    ) -> bool:
        # só altera se ainda estiver PENDENTE: dois pagamentos simultâneos -> um único vence
        stmt = (
            update(InstallmentORM)
            .where(InstallmentORM.id == installment_id)
            .where(InstallmentORM.status == InstallmentStatus.PENDENTE)
            .values(status=status, payment_date=payment_date)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        return result.rowcount == 1

    @_store_op
    def create_expense(
        self,
        *,
        user_id: int,
        date: date,
        value: Decimal,
        category: str,
        payment_type: PaymentType,
        transaction_type: TransactionType,
        description: Optional[str] = None,
    ) -> ExpenseORM:
        expense = ExpenseORM(
            user_id=user_id,
            date=date,
            value=value,
            category=category,
            payment_type=payment_type,
            transaction_type=transaction_type,
            description=description,
        )
        self.db.add(expense)
        self.db.flush()
        return expense

    @_store_op
    def create_installments(
        self, expense: ExpenseORM, installments: Iterable[InstallmentORM]
    ) -> list[InstallmentORM]:
        rows = list(installments)
        for inst in rows:
            inst.expense = expense
            self.db.add(inst)
        self.db.flush()
        return rows

    @_store_op
    def create_income(
        self,
        *,
        user_id: int,
        date: date,
        value: Decimal,
        description: Optional[str] = None,
    ) -> IncomeORM:
        income = IncomeORM(user_id=user_id, date=date, value=value, description=description)
        self.db.add(income)
        self.db.flush()
        return income

    @_store_op
    def find_or_create_category(self, user_id: int, name: str, type_: CategoryType) -> CategoryORM:
        stmt = select(CategoryORM).where(
            CategoryORM.user_id == user_id,
            CategoryORM.name == name,
            CategoryORM.type == type_,
        )
        row = self.db.execute(stmt).scalars().first()
        if row:
            return row

        row = CategoryORM(user_id=user_id, name=name, type=type_)
        self.db.add(row)
        self.db.flush()
        return row

    @_store_op
    def transaction_years(self, user_id: int) -> list[int]:
        income_years = select(extract("year", IncomeORM.date).label("year")).where(
            IncomeORM.user_id == user_id
        )
        expense_years = select(extract("year", ExpenseORM.date).label("year")).where(
            ExpenseORM.user_id == user_id
        )
        rows = self.db.execute(union(income_years, expense_years)).scalars().all()
        return sorted({int(y) for y in rows if y is not None})

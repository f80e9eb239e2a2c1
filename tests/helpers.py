import unittest
from decimal import Decimal

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from app.infra.ledger_store import SqlLedgerStore
from app.infra.models import (
    Base,
    ExpenseORM,
    IncomeORM,
    InstallmentORM,
    InstallmentStatus,
    PaymentType,
    TransactionType,
    UserORM,
    UserStatus,
)


class LedgerTestCase(unittest.TestCase):
    """Banco SQLite em memória novo para cada teste."""

    def setUp(self):
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            future=True,
        )
        Base.metadata.create_all(bind=self.engine)
        self.db: Session = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)()
        self.store = SqlLedgerStore(self.db)
        self.user = self.make_user("ana@example.com")

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    # fábricas
    def make_user(self, email, status=UserStatus.LIBERADO):
        user = UserORM(name="Ana", email=email, password_hash="x", status=status)
        self.db.add(user)
        self.db.flush()
        return user

    def make_income(self, value, on, user=None):
        income = IncomeORM(user_id=(user or self.user).id, date=on, value=Decimal(value))
        self.db.add(income)
        self.db.flush()
        return income

    def make_expense(self, value, on, payment_type=PaymentType.PIX, user=None, category="Mercado"):
        expense = ExpenseORM(
            user_id=(user or self.user).id,
            date=on,
            value=Decimal(value),
            category=category,
            payment_type=payment_type,
            transaction_type=TransactionType.A_VISTA,
        )
        self.db.add(expense)
        self.db.flush()
        return expense

    def make_installment(self, expense, number, value, due, status=InstallmentStatus.PENDENTE, paid_on=None):
        inst = InstallmentORM(
            expense=expense,
            parcela_number=number,
            value=Decimal(value),
            due_date=due,
            status=status,
            payment_date=paid_on,
        )
        self.db.add(inst)
        self.db.flush()
        return inst

    def reload(self):
        self.db.commit()
        self.db.expire_all()

import unittest
from datetime import date
from unittest.mock import MagicMock

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from app.infra.ledger_store import SqlLedgerStore
from app.infra.models import InstallmentStatus, PaymentType
from app.services.errors import StoreError

from helpers import LedgerTestCase


class TestFindExpensesInRange(LedgerTestCase):
    def setUp(self):
        super().setUp()
        self.in_month = self.make_expense("10.00", date(2024, 3, 5), PaymentType.PIX)
        self.outside = self.make_expense("10.00", date(2024, 1, 5), PaymentType.PIX)

        self.due_in_month = self.make_expense("200.00", date(2024, 1, 10), PaymentType.CREDITO)
        self.make_installment(self.due_in_month, 1, "100.00", date(2024, 2, 10))
        self.make_installment(self.due_in_month, 2, "100.00", date(2024, 3, 10))

        self.paid_early = self.make_expense("100.00", date(2023, 12, 1), PaymentType.CREDITO)
        self.make_installment(
            self.paid_early, 1, "100.00", date(2024, 6, 1),
            status=InstallmentStatus.PAGOANTECIPADO, paid_on=date(2024, 3, 20),
        )
        self.reload()

    def test_selects_by_date_due_date_and_early_payment(self):
        rows = self.store.find_expenses_in_range(self.user.id, date(2024, 3, 1), date(2024, 3, 31))
        ids = {e.id for e in rows}

        self.assertEqual(ids, {self.in_month.id, self.due_in_month.id, self.paid_early.id})

    def test_installments_come_loaded(self):
        rows = self.store.find_expenses_in_range(self.user.id, date(2024, 3, 1), date(2024, 3, 31))
        credit = [e for e in rows if e.id == self.due_in_month.id][0]
        self.assertEqual([i.parcela_number for i in credit.installments], [1, 2])

    def test_range_is_inclusive(self):
        rows = self.store.find_expenses_in_range(self.user.id, date(2024, 3, 5), date(2024, 3, 5))
        self.assertEqual([e.id for e in rows], [self.in_month.id])


class TestInstallmentConstraints(LedgerTestCase):
    def test_duplicate_parcela_number_is_rejected(self):
        expense = self.make_expense("10.00", date(2024, 1, 1), PaymentType.CREDITO)
        self.make_installment(expense, 1, "5.00", date(2024, 2, 1))
        with self.assertRaises(IntegrityError):
            self.make_installment(expense, 1, "5.00", date(2024, 3, 1))

    def test_paid_status_requires_payment_date(self):
        expense = self.make_expense("10.00", date(2024, 1, 1), PaymentType.CREDITO)
        with self.assertRaises(IntegrityError):
            self.make_installment(expense, 1, "5.00", date(2024, 2, 1), status=InstallmentStatus.PAGO)


class TestStoreErrors(unittest.TestCase):
    def setUp(self):
        self.db = MagicMock(spec=Session)
        self.db.execute.side_effect = OperationalError("SELECT 1", {}, Exception("conexão perdida"))
        self.store = SqlLedgerStore(self.db)

    def test_sqlalchemy_errors_become_store_error(self):
        with self.assertRaises(StoreError) as ctx:
            self.store.find_incomes_in_range(1, date(2024, 1, 1), date(2024, 1, 31))
        self.assertIsInstance(ctx.exception.__cause__, OperationalError)

    def test_conditional_update_failure(self):
        with self.assertRaises(StoreError):
            self.store.update_installment_status(1, InstallmentStatus.PAGO, date(2024, 1, 1))

from datetime import date
from decimal import Decimal

from app.infra.models import InstallmentStatus, PaymentType
from app.services.errors import NotFound, ValidationError
from app.services.expenses_service import add_expense
from app.services.summary_service import (
    month_bounds,
    summarize_month,
    summarize_year,
    transaction_years,
)

from helpers import LedgerTestCase


class TestSummarizeMonth(LedgerTestCase):
    def test_credit_purchase_counts_only_first_installment_in_february(self):
        add_expense(
            self.store,
            user_id=self.user.id,
            category="Eletrônicos",
            value="300.00",
            payment_type="CREDITO",
            date=date(2024, 1, 15),
            installments=3,
            installment_value="100.00",
        )
        self.reload()

        feb = summarize_month(self.store, self.user.id, 2, 2024)
        self.assertEqual(feb.total_despesas, Decimal("100.00"))
        self.assertEqual(feb.total_credito_a_pagar, Decimal("100.00"))
        self.assertEqual(feb.total_credito_pago, Decimal("0.00"))
        # compra feita em janeiro: não é crédito usado em fevereiro
        self.assertEqual(feb.total_credito_usado, Decimal("0.00"))

        jan = summarize_month(self.store, self.user.id, 1, 2024)
        self.assertEqual(jan.total_despesas, Decimal("0.00"))
        self.assertEqual(jan.total_credito_usado, Decimal("300.00"))
        self.assertEqual(len(jan.despesas_credito_resumo), 1)
        self.assertEqual(jan.despesas_credito_resumo[0].total_parcelas, 3)
        self.assertFalse(jan.despesas_credito_resumo[0].compra_paga)

    def test_early_payment_moves_installment_to_payment_month(self):
        expense = self.make_expense("200.00", date(2024, 1, 15), PaymentType.CREDITO)
        self.make_installment(expense, 1, "100.00", date(2024, 2, 15))
        self.make_installment(
            expense, 2, "100.00", date(2024, 3, 15),
            status=InstallmentStatus.PAGOANTECIPADO, paid_on=date(2024, 2, 20),
        )
        self.reload()

        feb = summarize_month(self.store, self.user.id, 2, 2024)
        mar = summarize_month(self.store, self.user.id, 3, 2024)

        self.assertEqual(feb.total_despesas, Decimal("200.00"))
        self.assertEqual(feb.total_credito_pago, Decimal("100.00"))
        self.assertEqual(feb.total_credito_a_pagar, Decimal("100.00"))
        self.assertEqual(mar.total_despesas, Decimal("0.00"))

        detail = feb.despesas[0]
        early = [p for p in detail.parcelas if p.parcela_number == 2][0]
        self.assertTrue(early.antecipada_deste_mes)
        self.assertFalse(early.vence_neste_mes)

    def test_paid_installment_stays_in_due_month(self):
        expense = self.make_expense("100.00", date(2024, 1, 10), PaymentType.CREDITO)
        self.make_installment(
            expense, 1, "100.00", date(2024, 2, 10),
            status=InstallmentStatus.PAGO, paid_on=date(2024, 2, 11),
        )
        self.reload()

        feb = summarize_month(self.store, self.user.id, 2, 2024)
        self.assertEqual(feb.total_despesas, Decimal("100.00"))
        self.assertEqual(feb.total_credito_pago, Decimal("100.00"))
        self.assertTrue(feb.despesas[0].compra_paga)

    def test_credit_without_installments_counts_by_purchase_date(self):
        self.make_expense("80.00", date(2024, 5, 3), PaymentType.CREDITO)
        self.reload()

        may = summarize_month(self.store, self.user.id, 5, 2024)
        self.assertEqual(may.total_despesas, Decimal("80.00"))
        self.assertEqual(may.total_credito, Decimal("80.00"))
        self.assertEqual(may.total_credito_usado, Decimal("80.00"))
        self.assertEqual(may.despesas[0].total_parcelas, 1)

    def test_payment_type_subtotals_plus_credit_equal_total(self):
        self.make_income("5000.00", date(2024, 4, 5))
        self.make_expense("10.50", date(2024, 4, 1), PaymentType.PIX)
        self.make_expense("20.25", date(2024, 4, 30), PaymentType.DEBITO)
        self.make_expense("5.00", date(2024, 4, 12), PaymentType.DINHEIRO)
        self.make_expense("99.99", date(2024, 3, 31), PaymentType.PIX)
        credit = self.make_expense("300.00", date(2024, 3, 10), PaymentType.CREDITO)
        self.make_installment(credit, 1, "150.00", date(2024, 4, 10))
        self.make_installment(credit, 2, "150.00", date(2024, 5, 10))
        self.reload()

        apr = summarize_month(self.store, self.user.id, 4, 2024)

        self.assertEqual(apr.total_pix, Decimal("10.50"))
        self.assertEqual(apr.total_debito, Decimal("20.25"))
        self.assertEqual(apr.total_dinheiro, Decimal("5.00"))
        self.assertEqual(apr.total_credito, Decimal("150.00"))
        self.assertEqual(
            apr.total_pix + apr.total_debito + apr.total_dinheiro + apr.total_credito,
            apr.total_despesas,
        )
        self.assertEqual(apr.total_receitas, Decimal("5000.00"))
        self.assertEqual(apr.saldo, Decimal("4814.25"))
        self.assertEqual(len(apr.receitas), 1)

    def test_other_users_data_is_ignored(self):
        other = self.make_user("bob@example.com")
        self.make_expense("50.00", date(2024, 4, 1), PaymentType.PIX, user=other)
        self.make_income("70.00", date(2024, 4, 1), user=other)
        self.reload()

        apr = summarize_month(self.store, self.user.id, 4, 2024)
        self.assertEqual(apr.total_despesas, Decimal("0.00"))
        self.assertEqual(apr.total_receitas, Decimal("0.00"))

    def test_invalid_month(self):
        with self.assertRaises(ValidationError):
            summarize_month(self.store, self.user.id, 13, 2024)
        with self.assertRaises(ValidationError):
            summarize_month(self.store, self.user.id, 0, 2024)

    def test_non_numeric_arguments(self):
        with self.assertRaises(ValidationError):
            summarize_month(self.store, self.user.id, "abc", 2024)
        with self.assertRaises(ValidationError):
            summarize_month(self.store, "x", 2, 2024)
        with self.assertRaises(ValidationError):
            summarize_month(self.store, self.user.id, 2, None)
        with self.assertRaises(ValidationError):
            summarize_month(self.store, self.user.id, True, 2024)

    def test_numeric_strings_are_accepted(self):
        report = summarize_month(self.store, str(self.user.id), "2", "2024")
        self.assertEqual((report.month, report.year), (2, 2024))

    def test_unknown_user(self):
        with self.assertRaises(NotFound):
            summarize_month(self.store, 9999, 2, 2024)

    def test_month_bounds(self):
        self.assertEqual(month_bounds(2024, 2), (date(2024, 2, 1), date(2024, 2, 29)))
        self.assertEqual(month_bounds(2023, 12), (date(2023, 12, 1), date(2023, 12, 31)))


class TestSummarizeYear(LedgerTestCase):
    def test_omits_empty_months_and_orders_ascending(self):
        self.make_income("1000.00", date(2024, 6, 1))
        self.make_expense("200.00", date(2024, 2, 1), PaymentType.DINHEIRO)
        self.make_expense("999.00", date(2023, 6, 1), PaymentType.PIX)
        self.reload()

        months = list(summarize_year(self.store, self.user.id, 2024))

        self.assertEqual([m.month for m in months], [2, 6])
        self.assertEqual(months[0].despesa_total, Decimal("200.00"))
        self.assertEqual(months[0].saldo, Decimal("-200.00"))
        self.assertEqual(months[1].receita_total, Decimal("1000.00"))
        self.assertEqual(months[1].saldo, Decimal("1000.00"))

    def test_each_installment_is_counted_exactly_once(self):
        expense = self.make_expense("400.00", date(2024, 1, 20), PaymentType.CREDITO)
        self.make_installment(expense, 1, "100.00", date(2024, 2, 20), status=InstallmentStatus.PAGO, paid_on=date(2024, 2, 21))
        self.make_installment(
            expense, 2, "100.00", date(2024, 3, 20),
            status=InstallmentStatus.PAGOANTECIPADO, paid_on=date(2024, 2, 25),
        )
        self.make_installment(expense, 3, "100.00", date(2024, 4, 20))
        self.make_installment(expense, 4, "100.00", date(2024, 5, 20))
        self.reload()

        months = list(summarize_year(self.store, self.user.id, 2024))

        by_month = {m.month: m.despesa_total for m in months}
        self.assertEqual(
            by_month,
            {2: Decimal("200.00"), 4: Decimal("100.00"), 5: Decimal("100.00")},
        )
        self.assertEqual(sum(by_month.values()), Decimal("400.00"))

    def test_result_can_be_iterated_again(self):
        self.make_income("10.00", date(2024, 1, 1))
        self.reload()

        summary = summarize_year(self.store, self.user.id, 2024)
        self.assertEqual(list(summary), list(summary))

    def test_installment_due_next_year_is_left_out(self):
        expense = self.make_expense("100.00", date(2024, 12, 10), PaymentType.CREDITO)
        self.make_installment(expense, 1, "100.00", date(2025, 1, 10))
        self.reload()

        self.assertEqual(list(summarize_year(self.store, self.user.id, 2024)), [])
        months = list(summarize_year(self.store, self.user.id, 2025))
        self.assertEqual([m.month for m in months], [1])

    def test_validation(self):
        with self.assertRaises(ValidationError):
            summarize_year(self.store, self.user.id, "20x4")
        with self.assertRaises(NotFound):
            summarize_year(self.store, 9999, 2024)


class TestTransactionYears(LedgerTestCase):
    def test_distinct_sorted_years(self):
        self.make_income("1.00", date(2025, 1, 1))
        self.make_income("1.00", date(2023, 5, 1))
        self.make_expense("1.00", date(2025, 3, 1))
        self.make_expense("1.00", date(2024, 3, 1))
        self.reload()

        self.assertEqual(transaction_years(self.store, self.user.id), [2023, 2024, 2025])

    def test_no_records(self):
        self.assertEqual(transaction_years(self.store, self.user.id), [])

    def test_unknown_user(self):
        with self.assertRaises(NotFound):
            transaction_years(self.store, 9999)

"""
Tests for the BookService (day, journal, cash and bank books, stats).
"""

from datetime import date
from decimal import Decimal

import pytest

from books_ledger.exceptions import InvalidDateRangeError
from books_ledger.models.enums import VoucherType
from books_ledger.services.account_service import AccountService
from books_ledger.services.book_service import BookService


class TestDayBook:

    def test_all_vouchers_in_date_order(self, db_session, chart, payroll_month):
        book = BookService(db_session).day_book()

        assert book.total_vouchers == 5
        assert [v.date for v in book.vouchers] == sorted(v.date for v in book.vouchers)
        assert book.total_debit == Decimal("23800.00")
        assert book.total_credit == Decimal("23800.00")
        assert book.vouchers[0].lines[0].account_code == "BANK"

    def test_same_day_ordered_by_number(self, db_session, chart, payroll_month):
        book = BookService(db_session).day_book(date(2024, 4, 30), date(2024, 4, 30))
        assert [v.voucher_number for v in book.vouchers] == ["JV-000001", "PV-000001"]

    def test_filter_by_type(self, db_session, chart, payroll_month):
        book = BookService(db_session).day_book(voucher_type=VoucherType.RECEIPT)
        assert [v.voucher_number for v in book.vouchers] == ["RV-000001", "RV-000002"]

    def test_journal_book(self, db_session, chart, payroll_month):
        book = BookService(db_session).journal_book()
        assert book.total_vouchers == 1
        assert book.vouchers[0].voucher_type == VoucherType.JOURNAL
        assert book.total_debit == Decimal("6000.00")

    def test_inverted_range(self, db_session):
        with pytest.raises(InvalidDateRangeError):
            BookService(db_session).day_book(date(2024, 5, 1), date(2024, 4, 1))


class TestCashAndBankBooks:

    def test_cash_book(self, db_session, chart, payroll_month):
        book = BookService(db_session).cash_book()

        assert book.account_codes == ["CASH"]
        assert [(e.receipt, e.payment) for e in book.entries] == [
            (Decimal("2000.00"), Decimal("0.00")),
            (Decimal("0.00"), Decimal("800.00")),
        ]
        assert book.entries[0].particulars == "Fees"
        assert book.opening_balance == Decimal("0.00")
        assert book.total_receipts == Decimal("2000.00")
        assert book.total_payments == Decimal("800.00")
        assert book.closing_balance == Decimal("1200.00")

    def test_bank_book_range(self, db_session, chart, payroll_month):
        book = BookService(db_session).bank_book(from_date=date(2024, 4, 30))

        assert book.opening_balance == Decimal("10000.00")
        assert len(book.entries) == 1
        assert book.entries[0].payment == Decimal("5000.00")
        assert book.closing_balance == Decimal("5000.00")

    def test_closing_matches_ledger(self, db_session, chart, payroll_month):
        book = BookService(db_session).bank_book()
        bank = AccountService(db_session).get_account(chart["BANK"])
        assert book.closing_balance == bank.balance.amount

    def test_no_accounts_of_type(self, db_session):
        book = BookService(db_session).bank_book()
        assert book.account_codes == []
        assert book.entries == []
        assert book.closing_balance == Decimal("0.00")


class TestStats:

    def test_stats(self, db_session, chart, payroll_month):
        AccountService(db_session).deactivate(chart["INTEREST"])
        db_session.commit()

        stats = BookService(db_session).stats(today=date(2024, 6, 1))

        assert stats.total_accounts == len(chart) - 1
        assert stats.financial_year == "2024-25"
        assert stats.active_vouchers == 5
        assert stats.total_transactions == 10
        assert stats.accuracy_rate == 100

    def test_stats_for_another_year(self, db_session, chart, payroll_month):
        stats = BookService(db_session).stats(today=date(2025, 4, 1))
        assert stats.financial_year == "2025-26"
        assert stats.active_vouchers == 0

    def test_empty_books(self, db_session):
        stats = BookService(db_session).stats(today=date(2024, 6, 1))
        assert stats.total_accounts == 0
        assert stats.accuracy_rate == 100

"""
Tests for the LedgerService (account ledger and recomputed balances).
"""

from datetime import date
from decimal import Decimal

import pytest

from books_ledger.exceptions import InvalidDateRangeError, NotFoundError
from books_ledger.models.account import Account
from books_ledger.models.enums import AccountGroup, BalanceSide, VoucherType
from books_ledger.schemas.account import AccountCreate
from books_ledger.services.account_service import AccountService
from books_ledger.services.ledger_service import LedgerService, MULTIPLE_ACCOUNTS
from books_ledger.services.posting_service import PostingService


class TestAccountLedger:

    def test_full_ledger_matches_stored_balance(self, db_session, chart, payroll_month):
        service = LedgerService(db_session)
        for code, account_id in chart.items():
            ledger = service.account_ledger(account_id)
            account = db_session.get(Account, account_id)
            assert (ledger.closing_balance, ledger.closing_side) == (
                account.current_balance, account.current_balance_side,
            ), code

    def test_running_balance(self, db_session, chart, payroll_month):
        ledger = LedgerService(db_session).account_ledger(chart["CASH"])

        assert ledger.opening_balance == Decimal("0.00")
        assert ledger.opening_side == BalanceSide.DR
        assert [(e.debit, e.credit) for e in ledger.entries] == [
            (Decimal("2000.00"), Decimal("0.00")),
            (Decimal("0.00"), Decimal("800.00")),
        ]
        assert [e.running_balance for e in ledger.entries] == [
            Decimal("2000.00"), Decimal("1200.00"),
        ]
        assert ledger.total_debit == Decimal("2000.00")
        assert ledger.total_credit == Decimal("800.00")
        assert ledger.closing_balance == Decimal("1200.00")
        assert ledger.closing_side == BalanceSide.DR

    def test_range_carries_earlier_postings_into_opening(
        self, db_session, chart, payroll_month
    ):
        ledger = LedgerService(db_session).account_ledger(
            chart["BANK"], from_date=date(2024, 4, 30), to_date=date(2024, 4, 30),
        )

        assert ledger.opening_balance == Decimal("10000.00")
        assert ledger.opening_side == BalanceSide.DR
        assert len(ledger.entries) == 1
        assert ledger.entries[0].credit == Decimal("5000.00")
        assert ledger.closing_balance == Decimal("5000.00")

    def test_running_balance_flips_side(self, db_session, chart, post):
        post(VoucherType.RECEIPT, date(2024, 6, 1),
             ("CASH", "500", "0"), ("CAPITAL", "0", "500"))
        post(VoucherType.PAYMENT, date(2024, 6, 2),
             ("RENT", "700", "0"), ("CASH", "0", "700"))

        ledger = LedgerService(db_session).account_ledger(chart["CASH"])
        assert [(e.running_balance, e.running_balance_side) for e in ledger.entries] == [
            (Decimal("500.00"), BalanceSide.DR),
            (Decimal("200.00"), BalanceSide.CR),
        ]

    def test_particulars(self, db_session, chart, post):
        post(VoucherType.RECEIPT, date(2024, 6, 1),
             ("CASH", "500", "0"), ("CAPITAL", "0", "500"))
        post(VoucherType.JOURNAL, date(2024, 6, 2),
             ("SALARIES", "900", "0"),
             ("CASH", "0", "400"), ("BANK", "0", "500"))

        entries = LedgerService(db_session).account_ledger(chart["CASH"]).entries
        assert entries[0].particulars == "Capital"
        assert entries[1].particulars == MULTIPLE_ACCOUNTS

    def test_opening_balance_of_account(self, db_session, chart, post):
        loan = AccountService(db_session).create_account(AccountCreate(
            code="LOAN", name="Bank loan", group=AccountGroup.LIABILITIES,
            account_type="Loans", opening_balance=Decimal("5000"),
        ))
        db_session.commit()

        ledger = LedgerService(db_session).account_ledger(loan.id)
        assert ledger.opening_balance == Decimal("5000.00")
        assert ledger.opening_side == BalanceSide.CR
        assert ledger.entries == []
        assert ledger.closing_balance == Decimal("5000.00")

    def test_reversal_shows_offsetting_entries(self, db_session, chart, post):
        post(VoucherType.RECEIPT, date(2024, 6, 1),
             ("BANK", "10000", "0"), ("CAPITAL", "0", "10000"))
        original = post(VoucherType.PAYMENT, date(2024, 6, 2),
                        ("SALARIES", "1200", "0"), ("BANK", "0", "1200"))
        original_id = original.id
        reversal = PostingService(db_session).reverse(
            original_id, "auditor", date(2024, 6, 3)
        )
        db_session.commit()

        ledger = LedgerService(db_session).account_ledger(
            chart["BANK"], from_date=date(2024, 6, 2),
        )

        assert [e.voucher_id for e in ledger.entries] == [original_id, reversal.id]
        assert [(e.debit, e.credit) for e in ledger.entries] == [
            (Decimal("0.00"), Decimal("1200.00")),
            (Decimal("1200.00"), Decimal("0.00")),
        ]
        assert ledger.entries[0].voucher_number == "PV-000001"
        assert ledger.entries[1].voucher_number == "PV-000002"
        assert (ledger.closing_balance, ledger.closing_side) == (
            ledger.opening_balance, ledger.opening_side,
        )
        assert ledger.opening_balance == Decimal("10000.00")

        salaries = LedgerService(db_session).account_ledger(chart["SALARIES"])
        assert len(salaries.entries) == 2
        assert salaries.closing_balance == Decimal("0.00")

    def test_unknown_account(self, db_session):
        with pytest.raises(NotFoundError):
            LedgerService(db_session).account_ledger(999)

    def test_inverted_range(self, db_session, chart):
        with pytest.raises(InvalidDateRangeError):
            LedgerService(db_session).account_ledger(
                chart["CASH"], from_date=date(2024, 5, 1), to_date=date(2024, 4, 1),
            )


class TestBalancesAsOf:

    def test_excludes_later_postings(self, db_session, chart, payroll_month):
        service = LedgerService(db_session)

        balances = service.balances_as_of(date(2024, 4, 30))
        assert balances[chart["CASH"]].amount == Decimal("2000.00")

        balances = service.balances_as_of()
        assert balances[chart["CASH"]].amount == Decimal("1200.00")
        assert balances[chart["SAL-PAY"]].amount == Decimal("-1000.00")

    def test_restricted_to_accounts(self, db_session, chart, payroll_month):
        balances = LedgerService(db_session).balances_as_of(
            account_ids=[chart["BANK"]]
        )
        assert list(balances) == [chart["BANK"]]
        assert balances[chart["BANK"]].amount == Decimal("5000.00")

    def test_movements(self, db_session, chart, payroll_month):
        movements = LedgerService(db_session).movements(
            date(2024, 4, 30), date(2024, 4, 30)
        )
        assert movements[chart["SAL-PAY"]] == (Decimal("5000.00"), Decimal("6000.00"))
        assert chart["CASH"] not in movements

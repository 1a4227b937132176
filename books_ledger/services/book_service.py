"""
Books: day book, journal book, cash book, bank book and summary
statistics. All are read-only views recomputed on every call.
"""

from datetime import date, timedelta

from sqlalchemy import select, func
from sqlalchemy.orm import Session, selectinload

from books_ledger.models.account import Account
from books_ledger.models.balance import Balance, ZERO, quantize
from books_ledger.models.enums import (
    VoucherType,
    BANK_ACCOUNT_TYPE,
    CASH_ACCOUNT_TYPE,
)
from books_ledger.models.voucher import Voucher, VoucherLine
from books_ledger.schemas.reports import (
    BookLine,
    BookVoucher,
    BooksStats,
    CashBook,
    CashBookEntry,
    DayBook,
)
from books_ledger.services.financial_year_service import FinancialYearService
from books_ledger.services.ledger_service import (
    LedgerService,
    check_range,
    particulars_for,
)


class BookService:

    def __init__(self, db: Session):
        self.db = db
        self.ledger = LedgerService(db)

    def day_book(
        self,
        from_date: date | None = None,
        to_date: date | None = None,
        voucher_type: VoucherType | None = None,
    ) -> DayBook:
        """Every voucher in the range with its lines, in date order."""
        check_range(from_date, to_date)
        stmt = (
            select(Voucher)
            .options(selectinload(Voucher.lines).selectinload(VoucherLine.account))
            .order_by(Voucher.date, Voucher.voucher_number)
        )
        if from_date:
            stmt = stmt.where(Voucher.date >= from_date)
        if to_date:
            stmt = stmt.where(Voucher.date <= to_date)
        if voucher_type is not None:
            stmt = stmt.where(Voucher.voucher_type == voucher_type)
        vouchers = self.db.execute(stmt).scalars().all()

        book = [
            BookVoucher(
                voucher_id=v.id,
                date=v.date,
                voucher_number=v.voucher_number,
                voucher_type=v.voucher_type,
                narration=v.narration,
                reference_number=v.reference_number,
                cheque_number=v.cheque_number,
                lines=[
                    BookLine(
                        account_code=line.account.code,
                        account_name=line.account.name,
                        debit=line.debit,
                        credit=line.credit,
                        narration=line.narration,
                    )
                    for line in v.lines
                ],
                total_debit=v.total_debit,
                total_credit=v.total_credit,
            )
            for v in vouchers
        ]
        return DayBook(
            from_date=from_date,
            to_date=to_date,
            vouchers=book,
            total_vouchers=len(book),
            total_debit=quantize(sum((v.total_debit for v in book), ZERO)),
            total_credit=quantize(sum((v.total_credit for v in book), ZERO)),
        )

    def journal_book(
        self,
        from_date: date | None = None,
        to_date: date | None = None,
    ) -> DayBook:
        return self.day_book(from_date, to_date, voucher_type=VoucherType.JOURNAL)

    def cash_book(
        self,
        from_date: date | None = None,
        to_date: date | None = None,
    ) -> CashBook:
        return self._account_book(CASH_ACCOUNT_TYPE, from_date, to_date)

    def bank_book(
        self,
        from_date: date | None = None,
        to_date: date | None = None,
    ) -> CashBook:
        return self._account_book(BANK_ACCOUNT_TYPE, from_date, to_date)

    def _account_book(
        self,
        account_type: str,
        from_date: date | None,
        to_date: date | None,
    ) -> CashBook:
        """
        Movements on every account of one type.

        Money coming in is a debit on a cash or bank account, so
        debits are receipts and credits are payments. Balances are
        Dr-positive: a negative closing balance is an overdraft.
        """
        check_range(from_date, to_date)
        accounts = self.db.execute(
            select(Account)
            .where(Account.account_type == account_type)
            .order_by(Account.code)
        ).scalars().all()
        account_ids = [a.id for a in accounts]

        if from_date:
            before = self.ledger.balances_as_of(
                from_date - timedelta(days=1), account_ids
            )
            opening = sum(before.values(), Balance())
        else:
            opening = sum((a.opening for a in accounts), Balance())

        entries = []
        if account_ids:
            stmt = (
                select(VoucherLine)
                .join(Voucher, VoucherLine.voucher_id == Voucher.id)
                .where(VoucherLine.account_id.in_(account_ids))
                .options(
                    selectinload(VoucherLine.voucher)
                    .selectinload(Voucher.lines)
                    .selectinload(VoucherLine.account)
                )
                .order_by(
                    Voucher.date, Voucher.voucher_number, VoucherLine.line_number
                )
            )
            if from_date:
                stmt = stmt.where(Voucher.date >= from_date)
            if to_date:
                stmt = stmt.where(Voucher.date <= to_date)

            for line in self.db.execute(stmt).scalars().all():
                voucher = line.voucher
                entries.append(CashBookEntry(
                    date=voucher.date,
                    voucher_id=voucher.id,
                    voucher_number=voucher.voucher_number,
                    voucher_type=voucher.voucher_type,
                    account_code=line.account.code,
                    particulars=particulars_for(voucher, line.account_id),
                    narration=line.narration or voucher.narration,
                    reference_number=voucher.reference_number,
                    cheque_number=voucher.cheque_number,
                    receipt=line.debit,
                    payment=line.credit,
                ))

        total_receipts = quantize(sum((e.receipt for e in entries), ZERO))
        total_payments = quantize(sum((e.payment for e in entries), ZERO))
        closing = opening.apply(total_receipts, total_payments)

        return CashBook(
            account_type=account_type,
            from_date=from_date,
            to_date=to_date,
            account_codes=[a.code for a in accounts],
            entries=entries,
            opening_balance=opening.amount,
            total_receipts=total_receipts,
            total_payments=total_payments,
            closing_balance=closing.amount,
        )

    def stats(self, today: date | None = None) -> BooksStats:
        """
        Headline figures for the books.

        accuracy_rate is the percentage of vouchers whose stored
        totals balance (100 for empty books); anything under 100
        means corrupted data.
        """
        today = today or date.today()
        year_code = FinancialYearService(self.db).code_for_date(today)

        total_accounts = self.db.execute(
            select(func.count(Account.id)).where(Account.is_active.is_(True))
        ).scalar_one()
        active_vouchers = self.db.execute(
            select(func.count(Voucher.id)).where(
                Voucher.financial_year == year_code
            )
        ).scalar_one()
        total_transactions = self.db.execute(
            select(func.count(VoucherLine.id))
        ).scalar_one()
        total_vouchers = self.db.execute(
            select(func.count(Voucher.id))
        ).scalar_one()
        balanced = self.db.execute(
            select(func.count(Voucher.id)).where(
                Voucher.total_debit == Voucher.total_credit
            )
        ).scalar_one()

        accuracy_rate = round(balanced * 100 / total_vouchers) if total_vouchers else 100

        return BooksStats(
            total_accounts=total_accounts,
            active_vouchers=active_vouchers,
            total_transactions=total_transactions,
            accuracy_rate=accuracy_rate,
            financial_year=year_code,
        )

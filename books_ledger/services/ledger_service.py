"""
Ledger service: read-only views over posted vouchers.

Balances here are always recomputed from opening balances and
voucher lines, never read from Account.current_balance. That is
what lets statements be drawn for any past date, and lets a
replayed ledger be compared against the stored balance.
"""

from datetime import date
from decimal import Decimal

from sqlalchemy import select, func
from sqlalchemy.orm import Session, selectinload

from books_ledger.exceptions import InvalidDateRangeError, NotFoundError
from books_ledger.models.account import Account
from books_ledger.models.balance import Balance, ZERO, quantize
from books_ledger.models.voucher import Voucher, VoucherLine
from books_ledger.schemas.reports import AccountLedger, LedgerEntry

MULTIPLE_ACCOUNTS = "Multiple Accounts"


def check_range(from_date: date | None, to_date: date | None) -> None:
    if from_date and to_date and from_date > to_date:
        raise InvalidDateRangeError(
            f"from_date {from_date} is after to_date {to_date}"
        )


def particulars_for(voucher: Voucher, account_id: int) -> str:
    """Name of the other side of the voucher, as shown in a ledger."""
    counter = {
        line.account_id: line.account.name
        for line in voucher.lines
        if line.account_id != account_id
    }
    if len(counter) == 1:
        return next(iter(counter.values()))
    return MULTIPLE_ACCOUNTS


class LedgerService:

    def __init__(self, db: Session):
        self.db = db

    def _line_sums(
        self,
        from_date: date | None = None,
        to_date: date | None = None,
        before: date | None = None,
        account_ids=None,
    ) -> dict[int, tuple[Decimal, Decimal]]:
        """Total debit and credit per account over the selected lines."""
        stmt = (
            select(
                VoucherLine.account_id,
                func.coalesce(func.sum(VoucherLine.debit), 0),
                func.coalesce(func.sum(VoucherLine.credit), 0),
            )
            .join(Voucher, VoucherLine.voucher_id == Voucher.id)
            .group_by(VoucherLine.account_id)
        )
        if from_date:
            stmt = stmt.where(Voucher.date >= from_date)
        if to_date:
            stmt = stmt.where(Voucher.date <= to_date)
        if before:
            stmt = stmt.where(Voucher.date < before)
        if account_ids is not None:
            stmt = stmt.where(VoucherLine.account_id.in_(list(account_ids)))

        return {
            account_id: (quantize(debit), quantize(credit))
            for account_id, debit, credit in self.db.execute(stmt).all()
        }

    def movements(
        self,
        from_date: date | None = None,
        to_date: date | None = None,
    ) -> dict[int, tuple[Decimal, Decimal]]:
        """Debits and credits per account for vouchers dated in the range."""
        check_range(from_date, to_date)
        return self._line_sums(from_date=from_date, to_date=to_date)

    def balances_as_of(
        self,
        as_of: date | None = None,
        account_ids=None,
    ) -> dict[int, Balance]:
        """
        Every account's balance including all vouchers dated on or
        before `as_of` (all vouchers when omitted).
        """
        stmt = select(Account)
        if account_ids is not None:
            stmt = stmt.where(Account.id.in_(list(account_ids)))
        accounts = self.db.execute(stmt).scalars().all()

        sums = self._line_sums(to_date=as_of, account_ids=account_ids)
        balances = {}
        for account in accounts:
            debit, credit = sums.get(account.id, (ZERO, ZERO))
            balances[account.id] = account.opening.apply(debit, credit)
        return balances

    def account_ledger(
        self,
        account_id: int,
        from_date: date | None = None,
        to_date: date | None = None,
    ) -> AccountLedger:
        """
        An account's ledger over a date range.

        The opening figure is the account's opening balance plus
        everything dated before from_date. Each entry carries the
        running balance after it. With no range, the closing
        balance equals the stored current balance.
        """
        account = self.db.get(Account, account_id)
        if not account:
            raise NotFoundError(f"Account {account_id} not found")
        check_range(from_date, to_date)

        opening = account.opening
        if from_date:
            debit, credit = self._line_sums(
                before=from_date, account_ids=[account.id]
            ).get(account.id, (ZERO, ZERO))
            opening = opening.apply(debit, credit)

        stmt = (
            select(VoucherLine)
            .join(Voucher, VoucherLine.voucher_id == Voucher.id)
            .where(VoucherLine.account_id == account.id)
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
        lines = self.db.execute(stmt).scalars().all()

        running = opening
        entries = []
        total_debit = total_credit = ZERO
        for line in lines:
            voucher = line.voucher
            running = running.apply(line.debit, line.credit)
            total_debit += line.debit
            total_credit += line.credit
            entries.append(LedgerEntry(
                date=voucher.date,
                voucher_id=voucher.id,
                voucher_number=voucher.voucher_number,
                voucher_type=voucher.voucher_type,
                particulars=particulars_for(voucher, account.id),
                narration=line.narration or voucher.narration,
                debit=line.debit,
                credit=line.credit,
                running_balance=running.magnitude,
                running_balance_side=running.side(account.natural_side),
            ))

        return AccountLedger(
            account_id=account.id,
            account_code=account.code,
            account_name=account.name,
            group=account.group,
            account_type=account.account_type,
            from_date=from_date,
            to_date=to_date,
            opening_balance=opening.magnitude,
            opening_side=opening.side(account.natural_side),
            entries=entries,
            total_debit=quantize(total_debit),
            total_credit=quantize(total_credit),
            closing_balance=running.magnitude,
            closing_side=running.side(account.natural_side),
        )

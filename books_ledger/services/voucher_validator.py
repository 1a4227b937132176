"""
Voucher validator: decides whether a draft may be posted.

Rules are checked in a fixed order and the first failure wins:

1. Every account exists and is active
2. At least two lines
3. Each line has exactly one non-zero side
4. Total debits equal total credits (at 2 decimal places)

The validator only reads. A draft that passes comes back as a
ValidVoucher, the only input the posting engine accepts.
"""

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from books_ledger.exceptions import (
    InactiveAccountError,
    InsufficientLinesError,
    LedgerError,
    MalformedLineError,
    UnbalancedError,
    UnknownAccountError,
)
from books_ledger.models.account import Account
from books_ledger.models.balance import ZERO, quantize
from books_ledger.schemas.voucher import ValidVoucher, VoucherCheck, VoucherDraft


def voucher_totals(draft: VoucherDraft) -> tuple[Decimal, Decimal]:
    total_debit = quantize(sum((line.debit for line in draft.lines), ZERO))
    total_credit = quantize(sum((line.credit for line in draft.lines), ZERO))
    return total_debit, total_credit


class VoucherValidator:

    def __init__(self, db: Session):
        self.db = db

    def load_accounts(
        self, account_ids, refresh: bool = False
    ) -> dict[int, Account]:
        """
        Fetch accounts by id.

        refresh=True re-reads rows already in the session, so a
        retried posting sees balances and versions written by others.
        """
        stmt = select(Account).where(Account.id.in_(list(account_ids)))
        if refresh:
            stmt = stmt.execution_options(populate_existing=True)
        accounts = self.db.execute(stmt).scalars().all()
        return {a.id: a for a in accounts}

    def validate(
        self,
        draft: VoucherDraft,
        accounts: dict[int, Account] | None = None,
    ) -> ValidVoucher:
        """
        Check a draft against every rule, raising on the first failure.

        `accounts` may be passed by the posting engine, which has
        already loaded them fresh inside its own attempt.
        """
        account_ids = {line.account_id for line in draft.lines}
        if accounts is None:
            accounts = self.load_accounts(account_ids)

        missing = account_ids - set(accounts)
        if missing:
            raise UnknownAccountError(missing)

        inactive = [
            accounts[i].code for i in account_ids if not accounts[i].is_active
        ]
        if inactive:
            raise InactiveAccountError(inactive)

        if len(draft.lines) < 2:
            raise InsufficientLinesError(
                f"A voucher needs at least 2 lines, got {len(draft.lines)}"
            )

        malformed = [
            number
            for number, line in enumerate(draft.lines, start=1)
            if (line.debit > ZERO) == (line.credit > ZERO)
        ]
        if malformed:
            raise MalformedLineError(malformed)

        total_debit, total_credit = voucher_totals(draft)
        if total_debit != total_credit:
            raise UnbalancedError(total_debit, total_credit)

        return ValidVoucher(
            draft=draft,
            total_debit=total_debit,
            total_credit=total_credit,
            account_ids=frozenset(account_ids),
        )

    def check(self, draft: VoucherDraft) -> VoucherCheck:
        """Speculative validation for live feedback. Never raises on bad input."""
        total_debit, total_credit = voucher_totals(draft)
        try:
            self.validate(draft)
        except LedgerError as e:
            return VoucherCheck(
                is_valid=False,
                total_debit=total_debit,
                total_credit=total_credit,
                difference=total_debit - total_credit,
                error=e.kind,
                message=str(e),
            )
        return VoucherCheck(
            is_valid=True,
            total_debit=total_debit,
            total_credit=total_credit,
            difference=ZERO,
        )

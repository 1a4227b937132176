"""
Posting service: the only writer of vouchers and balances.

Every posting, inside a single attempt:
1. Re-reads the touched accounts fresh
2. Re-validates the voucher against them
3. Refuses dates inside a closed financial year
4. Applies each line to its account's signed balance
5. Takes the next voucher number for the voucher type
6. Inserts the voucher and its lines, then flushes

Account rows carry a version stamp, so the balance UPDATEs are
conditional. Each attempt runs inside a SAVEPOINT. If another
posting got there first (stale version, voucher number already
taken) only that savepoint is rolled back and the attempt starts
over; earlier uncommitted work in the session is kept. Input
errors are never retried.

As everywhere else, the caller owns the commit.
"""

import logging
import math
from datetime import date, datetime

from sqlalchemy import select, func, insert, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from books_ledger.config import get_settings
from books_ledger.exceptions import (
    AlreadyReversedError,
    ClosedPeriodError,
    ConcurrentModificationError,
    InvalidDateRangeError,
    NotFoundError,
)
from books_ledger.models.enums import VoucherType, VOUCHER_PREFIXES
from books_ledger.models.voucher import Voucher, VoucherLine
from books_ledger.models.voucher_sequence import VoucherSequence
from books_ledger.schemas.voucher import (
    ValidVoucher,
    VoucherDraft,
    VoucherFilter,
    VoucherLineCreate,
)
from books_ledger.services.audit import record_event
from books_ledger.services.financial_year_service import FinancialYearService
from books_ledger.services.voucher_validator import VoucherValidator

logger = logging.getLogger(__name__)


class SequenceContention(Exception):
    """Another posting took the voucher number this attempt read."""


def format_voucher_number(
    voucher_type: VoucherType, sequence: int, width: int | None = None
) -> str:
    if width is None:
        width = get_settings().VOUCHER_NUMBER_WIDTH
    return f"{VOUCHER_PREFIXES[voucher_type]}-{sequence:0{width}d}"


class PostingService:

    def __init__(self, db: Session):
        self.db = db
        self.settings = get_settings()
        self.validator = VoucherValidator(db)
        self.years = FinancialYearService(db)

    # --- Posting ---

    def post(
        self,
        voucher: ValidVoucher | VoucherDraft,
        created_by: str,
        reversal_of_id: int | None = None,
    ) -> Voucher:
        """
        Post a voucher, retrying when a concurrent posting wins a race.

        A retry undoes only the failed attempt. After
        POSTING_MAX_RETRIES lost races, ConcurrentModificationError
        is raised and nothing from this voucher is written.
        """
        draft = voucher.draft if isinstance(voucher, ValidVoucher) else voucher
        attempts = max(1, self.settings.POSTING_MAX_RETRIES)

        for attempt in range(1, attempts + 1):
            try:
                with self.db.begin_nested():
                    return self._attempt(draft, created_by, reversal_of_id)
            except (StaleDataError, IntegrityError, SequenceContention) as e:
                logger.warning(
                    "Posting %s voucher dated %s lost a race "
                    "(attempt %d of %d): %s",
                    draft.voucher_type.value, draft.date,
                    attempt, attempts, type(e).__name__,
                )

        raise ConcurrentModificationError(
            f"Could not post {draft.voucher_type.value} voucher after "
            f"{attempts} attempts; accounts were changed concurrently"
        )

    def _attempt(
        self,
        draft: VoucherDraft,
        created_by: str,
        reversal_of_id: int | None,
    ) -> Voucher:
        account_ids = {line.account_id for line in draft.lines}
        accounts = self.validator.load_accounts(account_ids, refresh=True)
        valid = self.validator.validate(draft, accounts)

        if reversal_of_id is not None:
            self._check_not_reversed(reversal_of_id)

        year = self.years.year_for_date(draft.date)
        if year is not None and year.is_closed:
            raise ClosedPeriodError(
                f"Financial year {year.year_code} is closed; "
                f"cannot post on {draft.date}"
            )
        year_code = self.years.code_for_date(draft.date)

        balances = {i: accounts[i].balance for i in account_ids}
        for line in draft.lines:
            balances[line.account_id] = balances[line.account_id].apply(
                line.debit, line.credit
            )
        for account_id, balance in balances.items():
            accounts[account_id].set_balance(balance)

        sequence = self._next_sequence(draft.voucher_type)
        voucher = Voucher(
            voucher_type=draft.voucher_type,
            sequence_number=sequence,
            voucher_number=format_voucher_number(
                draft.voucher_type, sequence, self.settings.VOUCHER_NUMBER_WIDTH
            ),
            date=draft.date,
            financial_year=year_code,
            reference_number=draft.reference_number,
            cheque_number=draft.cheque_number,
            cheque_date=draft.cheque_date,
            narration=draft.narration,
            total_debit=valid.total_debit,
            total_credit=valid.total_credit,
            created_by=created_by,
            reversal_of_id=reversal_of_id,
            lines=[
                VoucherLine(
                    line_number=number,
                    account_id=line.account_id,
                    debit=line.debit,
                    credit=line.credit,
                    narration=line.narration,
                )
                for number, line in enumerate(draft.lines, start=1)
            ],
        )
        self.db.add(voucher)
        self.db.flush()

        record_event(self.db, "voucher_posted", {
            "voucher_id": voucher.id,
            "voucher_number": voucher.voucher_number,
            "total": valid.total_debit,
            "reversal_of_id": reversal_of_id,
        }, actor=created_by)
        logger.info(
            "Posted %s dated %s for %s",
            voucher.voucher_number, voucher.date, voucher.total_debit,
        )
        return voucher

    def _next_sequence(self, voucher_type: VoucherType) -> int:
        """
        Take the next number for a voucher type.

        The increment only succeeds if nobody moved the counter since
        we read it. A missing counter row is created; two postings
        creating it at once collide on the primary key.
        """
        seen = self.db.execute(
            select(VoucherSequence.next_value).where(
                VoucherSequence.voucher_type == voucher_type
            )
        ).scalar_one_or_none()

        if seen is None:
            self.db.execute(
                insert(VoucherSequence).values(
                    voucher_type=voucher_type, next_value=2
                )
            )
            return 1

        result = self.db.execute(
            update(VoucherSequence)
            .where(
                VoucherSequence.voucher_type == voucher_type,
                VoucherSequence.next_value == seen,
            )
            .values(next_value=seen + 1, updated_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise SequenceContention(voucher_type.value)
        return seen

    # --- Reversal ---

    def _check_not_reversed(self, voucher_id: int) -> None:
        reversal = self.db.execute(
            select(Voucher.voucher_number).where(
                Voucher.reversal_of_id == voucher_id
            )
        ).scalar_one_or_none()
        if reversal is not None:
            raise AlreadyReversedError(
                f"Voucher {voucher_id} was already reversed by {reversal}"
            )

    def reverse(
        self,
        voucher_id: int,
        created_by: str,
        reversal_date: date | None = None,
    ) -> Voucher:
        """
        Undo a voucher by posting its mirror image.

        The reversal has the same type, every line's debit and credit
        swapped, and the original's number as its reference. The
        original voucher is never touched.
        """
        original = self.get_voucher(voucher_id)
        self._check_not_reversed(original.id)

        draft = VoucherDraft(
            voucher_type=original.voucher_type,
            date=reversal_date or date.today(),
            lines=[
                VoucherLineCreate(
                    account_id=line.account_id,
                    debit=line.credit,
                    credit=line.debit,
                    narration=line.narration,
                )
                for line in original.lines
            ],
            reference_number=original.voucher_number,
            narration=f"Reversal of {original.voucher_number}",
        )
        original_number = original.voucher_number
        reversal = self.post(draft, created_by, reversal_of_id=original.id)
        logger.info("Reversed %s with %s", original_number, reversal.voucher_number)
        return reversal

    # --- Queries ---

    def get_voucher(self, voucher_id: int) -> Voucher:
        voucher = self.db.get(Voucher, voucher_id)
        if not voucher:
            raise NotFoundError(f"Voucher {voucher_id} not found")
        return voucher

    def get_by_number(self, voucher_number: str) -> Voucher:
        voucher = self.db.execute(
            select(Voucher).where(Voucher.voucher_number == voucher_number)
        ).scalar_one_or_none()
        if not voucher:
            raise NotFoundError(f"Voucher '{voucher_number}' not found")
        return voucher

    def list_vouchers(self, filters: VoucherFilter) -> tuple[list[Voucher], int]:
        """
        Filtered vouchers, newest first, one page at a time.

        Returns the page and the total number of matches.
        """
        if (
            filters.from_date and filters.to_date
            and filters.from_date > filters.to_date
        ):
            raise InvalidDateRangeError("from_date must not be after to_date")

        stmt = select(Voucher)
        if filters.voucher_type is not None:
            stmt = stmt.where(Voucher.voucher_type == filters.voucher_type)
        if filters.from_date:
            stmt = stmt.where(Voucher.date >= filters.from_date)
        if filters.to_date:
            stmt = stmt.where(Voucher.date <= filters.to_date)
        if filters.financial_year:
            stmt = stmt.where(Voucher.financial_year == filters.financial_year)
        if filters.account_id is not None:
            stmt = stmt.where(Voucher.id.in_(
                select(VoucherLine.voucher_id).where(
                    VoucherLine.account_id == filters.account_id
                )
            ))

        total = self.db.execute(
            select(func.count()).select_from(stmt.subquery())
        ).scalar_one()

        vouchers = self.db.execute(
            stmt.order_by(Voucher.date.desc(), Voucher.id.desc())
            .offset((filters.page - 1) * filters.limit)
            .limit(filters.limit)
        ).scalars().all()
        return list(vouchers), total


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if total else 0

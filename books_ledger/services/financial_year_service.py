"""
Financial year service.

Years partition the books into accounting periods. Postings
dated inside a closed year are refused by the posting engine.
"""

import logging
from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from books_ledger.config import get_settings
from books_ledger.exceptions import FinancialYearError, NotFoundError
from books_ledger.models.financial_year import FinancialYear
from books_ledger.models.voucher import Voucher
from books_ledger.schemas.financial_year import FinancialYearCreate
from books_ledger.services.audit import record_event

logger = logging.getLogger(__name__)


def financial_year_code(day: date, start_month: int | None = None) -> str:
    """
    Code of the financial year a date falls in.

    With the default April start, 2024-05-10 and 2025-03-31 are
    both "2024-25". A January start gives plain calendar years.
    """
    if start_month is None:
        start_month = get_settings().FINANCIAL_YEAR_START_MONTH
    if start_month == 1:
        return str(day.year)
    start_year = day.year if day.month >= start_month else day.year - 1
    return f"{start_year}-{(start_year + 1) % 100:02d}"


class FinancialYearService:

    def __init__(self, db: Session):
        self.db = db

    def create(self, request: FinancialYearCreate) -> FinancialYear:
        if request.start_date >= request.end_date:
            raise FinancialYearError("start_date must be before end_date")

        existing = self.db.execute(
            select(FinancialYear).where(
                FinancialYear.year_code == request.year_code
            )
        ).scalar_one_or_none()
        if existing:
            raise FinancialYearError(
                f"Financial year '{request.year_code}' already exists"
            )

        overlapping = self.db.execute(
            select(FinancialYear).where(
                FinancialYear.start_date <= request.end_date,
                FinancialYear.end_date >= request.start_date,
            ).limit(1)
        ).scalar_one_or_none()
        if overlapping:
            raise FinancialYearError(
                f"Financial year overlaps {overlapping.year_code}"
            )

        year = FinancialYear(
            year_code=request.year_code,
            start_date=request.start_date,
            end_date=request.end_date,
            description=request.description,
            created_by=request.created_by,
            # The newest year becomes the working year
            is_active=False,
        )
        self.db.add(year)
        self.db.flush()
        self._activate(year)

        record_event(self.db, "financial_year_created", {
            "year_code": year.year_code,
        }, actor=request.created_by)
        logger.info("Created financial year %s", year.year_code)
        return year

    def list_years(self) -> list[FinancialYear]:
        years = self.db.execute(
            select(FinancialYear).order_by(FinancialYear.start_date.desc())
        ).scalars().all()
        return list(years)

    def get(self, year_id: int) -> FinancialYear:
        year = self.db.get(FinancialYear, year_id)
        if not year:
            raise NotFoundError(f"Financial year {year_id} not found")
        return year

    def year_for_date(self, day: date) -> FinancialYear | None:
        return self.db.execute(
            select(FinancialYear).where(
                FinancialYear.start_date <= day,
                FinancialYear.end_date >= day,
            )
        ).scalar_one_or_none()

    def code_for_date(self, day: date) -> str:
        """The stored year's code when one covers the date, else the derived code."""
        year = self.year_for_date(day)
        if year is not None:
            return year.year_code
        return financial_year_code(day)

    def _activate(self, year: FinancialYear) -> None:
        others = self.db.execute(
            select(FinancialYear).where(
                FinancialYear.id != year.id,
                FinancialYear.is_active.is_(True),
            )
        ).scalars().all()
        for other in others:
            other.is_active = False
        year.is_active = True
        self.db.flush()

    def set_active(self, year_id: int) -> FinancialYear:
        """Make one year the working year; at most one is active."""
        year = self.get(year_id)
        self._activate(year)
        logger.info("Activated financial year %s", year.year_code)
        return year

    def close(self, year_id: int, actor: str | None = None) -> FinancialYear:
        year = self.get(year_id)
        if year.is_closed:
            raise FinancialYearError(f"Financial year {year.year_code} is already closed")
        year.is_closed = True
        year.closing_date = datetime.utcnow()
        self.db.flush()
        record_event(self.db, "financial_year_closed", {
            "year_code": year.year_code,
        }, actor=actor)
        logger.info("Closed financial year %s", year.year_code)
        return year

    def reopen(self, year_id: int, actor: str | None = None) -> FinancialYear:
        year = self.get(year_id)
        if not year.is_closed:
            raise FinancialYearError(f"Financial year {year.year_code} is not closed")
        year.is_closed = False
        year.closing_date = None
        self.db.flush()
        record_event(self.db, "financial_year_reopened", {
            "year_code": year.year_code,
        }, actor=actor)
        logger.info("Reopened financial year %s", year.year_code)
        return year

    def delete(self, year_id: int) -> None:
        """Remove a year definition. Closed years and years with vouchers stay."""
        year = self.get(year_id)
        if year.is_closed:
            raise FinancialYearError(
                f"Financial year {year.year_code} is closed and cannot be deleted"
            )
        used = self.db.execute(
            select(Voucher.id).where(
                Voucher.date >= year.start_date,
                Voucher.date <= year.end_date,
            ).limit(1)
        ).scalar_one_or_none()
        if used is not None:
            raise FinancialYearError(
                f"Financial year {year.year_code} has vouchers and cannot be deleted"
            )
        self.db.delete(year)
        self.db.flush()
        logger.info("Deleted financial year %s", year.year_code)

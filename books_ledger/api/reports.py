"""
Report endpoints: account ledger, statements and books.

Everything here is read-only and recomputed per request, so
there is nothing to commit or roll back.
"""

from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from books_ledger.api.errors import to_http_exception
from books_ledger.exceptions import LedgerError
from books_ledger.models.base import get_db
from books_ledger.models.enums import VoucherType
from books_ledger.services.book_service import BookService
from books_ledger.services.ledger_service import LedgerService
from books_ledger.services.statement_service import StatementService
from books_ledger.schemas.reports import (
    AccountLedger,
    BalanceSheet,
    BooksStats,
    CashBook,
    DayBook,
    ProfitAndLoss,
    TrialBalance,
)

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/ledger/{account_id}", response_model=AccountLedger)
def account_ledger(
    account_id: int,
    from_date: date | None = None,
    to_date: date | None = None,
    db: Session = Depends(get_db),
):
    """Opening balance, entries with running balance, and closing balance."""
    try:
        return LedgerService(db).account_ledger(account_id, from_date, to_date)
    except LedgerError as e:
        raise to_http_exception(e)


@router.get("/trial-balance", response_model=TrialBalance)
def trial_balance(
    as_of: date | None = None,
    db: Session = Depends(get_db),
):
    return StatementService(db).trial_balance(as_of)


@router.get("/profit-loss", response_model=ProfitAndLoss)
def profit_and_loss(
    from_date: date | None = None,
    to_date: date | None = None,
    db: Session = Depends(get_db),
):
    try:
        return StatementService(db).profit_and_loss(from_date, to_date)
    except LedgerError as e:
        raise to_http_exception(e)


@router.get("/balance-sheet", response_model=BalanceSheet)
def balance_sheet(
    as_of: date | None = None,
    db: Session = Depends(get_db),
):
    return StatementService(db).balance_sheet(as_of)


@router.get("/day-book", response_model=DayBook)
def day_book(
    from_date: date | None = None,
    to_date: date | None = None,
    voucher_type: VoucherType | None = None,
    db: Session = Depends(get_db),
):
    try:
        return BookService(db).day_book(from_date, to_date, voucher_type)
    except LedgerError as e:
        raise to_http_exception(e)


@router.get("/journal-book", response_model=DayBook)
def journal_book(
    from_date: date | None = None,
    to_date: date | None = None,
    db: Session = Depends(get_db),
):
    try:
        return BookService(db).journal_book(from_date, to_date)
    except LedgerError as e:
        raise to_http_exception(e)


@router.get("/cash-book", response_model=CashBook)
def cash_book(
    from_date: date | None = None,
    to_date: date | None = None,
    db: Session = Depends(get_db),
):
    try:
        return BookService(db).cash_book(from_date, to_date)
    except LedgerError as e:
        raise to_http_exception(e)


@router.get("/bank-book", response_model=CashBook)
def bank_book(
    from_date: date | None = None,
    to_date: date | None = None,
    db: Session = Depends(get_db),
):
    try:
        return BookService(db).bank_book(from_date, to_date)
    except LedgerError as e:
        raise to_http_exception(e)


@router.get("/stats", response_model=BooksStats)
def books_stats(db: Session = Depends(get_db)):
    return BookService(db).stats()

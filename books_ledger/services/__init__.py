"""Business logic services."""

from books_ledger.services.account_service import AccountService
from books_ledger.services.voucher_validator import VoucherValidator
from books_ledger.services.posting_service import PostingService
from books_ledger.services.ledger_service import LedgerService
from books_ledger.services.statement_service import StatementService
from books_ledger.services.book_service import BookService
from books_ledger.services.financial_year_service import FinancialYearService

__all__ = [
    "AccountService",
    "VoucherValidator",
    "PostingService",
    "LedgerService",
    "StatementService",
    "BookService",
    "FinancialYearService",
]

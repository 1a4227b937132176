"""
Pydantic schemas for derived views: account ledger, statements
and books.

None of these are persisted. They are recomputed from accounts
and vouchers on every request.
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel

from books_ledger.models.enums import AccountGroup, BalanceSide, VoucherType


# --- Account Ledger ---

class LedgerEntry(BaseModel):
    """One voucher line as seen from the account's ledger."""
    date: date
    voucher_id: int
    voucher_number: str
    voucher_type: VoucherType
    particulars: str
    narration: str
    debit: Decimal
    credit: Decimal
    running_balance: Decimal
    running_balance_side: BalanceSide


class AccountLedger(BaseModel):
    account_id: int
    account_code: str
    account_name: str
    group: AccountGroup
    account_type: str
    from_date: date | None
    to_date: date | None
    opening_balance: Decimal
    opening_side: BalanceSide
    entries: list[LedgerEntry]
    total_debit: Decimal
    total_credit: Decimal
    closing_balance: Decimal
    closing_side: BalanceSide


# --- Trial Balance ---

class TrialBalanceEntry(BaseModel):
    account_id: int
    account_code: str
    account_name: str
    group: AccountGroup
    account_type: str
    debit: Decimal
    credit: Decimal


class ColumnTotals(BaseModel):
    debit: Decimal
    credit: Decimal


class TrialBalance(BaseModel):
    as_of: date | None
    entries: list[TrialBalanceEntry]
    group_totals: dict[AccountGroup, ColumnTotals]
    total_debit: Decimal
    total_credit: Decimal
    is_balanced: bool
    difference: Decimal


# --- Profit & Loss / Balance Sheet ---

class StatementLine(BaseModel):
    account_id: int
    account_code: str
    account_name: str
    amount: Decimal


class TypeSection(BaseModel):
    """Accounts of one account type and their subtotal."""
    account_type: str
    accounts: list[StatementLine]
    total: Decimal


class ProfitAndLoss(BaseModel):
    from_date: date | None
    to_date: date | None
    income_by_type: list[TypeSection]
    expense_by_type: list[TypeSection]
    total_income: Decimal
    total_expenses: Decimal
    net_result: Decimal
    is_profit: bool
    profit_percentage: Decimal


class ProfitLossFigure(BaseModel):
    """Cumulative P&L carried to the balance sheet."""
    amount: Decimal
    is_profit: bool


class BalanceSheet(BaseModel):
    as_of: date | None
    assets_by_type: list[TypeSection]
    liabilities_by_type: list[TypeSection]
    capital: list[StatementLine]
    profit_loss: ProfitLossFigure
    total_assets: Decimal
    total_liabilities: Decimal
    total_capital: Decimal
    total_liabilities_and_capital: Decimal
    is_balanced: bool
    difference: Decimal


# --- Books ---

class BookLine(BaseModel):
    account_code: str
    account_name: str
    debit: Decimal
    credit: Decimal
    narration: str


class BookVoucher(BaseModel):
    voucher_id: int
    date: date
    voucher_number: str
    voucher_type: VoucherType
    narration: str
    reference_number: str | None
    cheque_number: str | None
    lines: list[BookLine]
    total_debit: Decimal
    total_credit: Decimal


class DayBook(BaseModel):
    from_date: date | None
    to_date: date | None
    vouchers: list[BookVoucher]
    total_vouchers: int
    total_debit: Decimal
    total_credit: Decimal


class CashBookEntry(BaseModel):
    """A debit (receipt) or credit (payment) on a cash or bank account."""
    date: date
    voucher_id: int
    voucher_number: str
    voucher_type: VoucherType
    account_code: str
    particulars: str
    narration: str
    reference_number: str | None
    cheque_number: str | None
    receipt: Decimal
    payment: Decimal


class CashBook(BaseModel):
    account_type: str
    from_date: date | None
    to_date: date | None
    account_codes: list[str]
    entries: list[CashBookEntry]
    opening_balance: Decimal
    total_receipts: Decimal
    total_payments: Decimal
    closing_balance: Decimal


class BooksStats(BaseModel):
    total_accounts: int
    active_vouchers: int
    total_transactions: int
    accuracy_rate: int
    financial_year: str

"""
Ledger error taxonomy.

Every input error derives from LedgerError, itself a ValueError,
so callers can keep the "ValueError means bad request" convention.
Each error carries a short `kind` the transport layer reports.

Out-of-balance statements are not errors: they are returned as
`is_balanced` / `difference` fields on the report.
"""

from decimal import Decimal


class LedgerError(ValueError):
    kind = "ledger_error"

    def to_dict(self) -> dict:
        return {"error": self.kind, "message": str(self)}


class NotFoundError(LedgerError):
    kind = "not_found"


class DuplicateCodeError(LedgerError):
    kind = "duplicate_code"


class InvalidGroupTypeError(LedgerError):
    kind = "invalid_group_type"


class AccountInUseError(LedgerError):
    """A master-data change that would rewrite history of a posted account."""
    kind = "account_in_use"


class UnknownAccountError(LedgerError):
    kind = "unknown_account"

    def __init__(self, account_ids):
        self.account_ids = sorted(account_ids)
        super().__init__(f"Accounts not found: {self.account_ids}")

    def to_dict(self) -> dict:
        return {**super().to_dict(), "account_ids": self.account_ids}


class InactiveAccountError(LedgerError):
    kind = "inactive_account"

    def __init__(self, codes):
        self.codes = sorted(codes)
        super().__init__(f"Accounts are not active: {', '.join(self.codes)}")

    def to_dict(self) -> dict:
        return {**super().to_dict(), "codes": self.codes}


class InsufficientLinesError(LedgerError):
    kind = "insufficient_lines"


class MalformedLineError(LedgerError):
    """A line with both sides set, or neither."""
    kind = "malformed_line"

    def __init__(self, line_numbers):
        self.line_numbers = list(line_numbers)
        super().__init__(
            "Each line needs exactly one non-zero side "
            f"(debit or credit); offending lines: {self.line_numbers}"
        )

    def to_dict(self) -> dict:
        return {**super().to_dict(), "line_numbers": self.line_numbers}


class UnbalancedError(LedgerError):
    kind = "unbalanced"

    def __init__(self, total_debit: Decimal, total_credit: Decimal):
        self.total_debit = total_debit
        self.total_credit = total_credit
        self.difference = total_debit - total_credit
        super().__init__(
            f"Voucher does not balance: debits={total_debit}, "
            f"credits={total_credit}, difference={self.difference}"
        )

    def to_dict(self) -> dict:
        return {
            **super().to_dict(),
            "total_debit": str(self.total_debit),
            "total_credit": str(self.total_credit),
            "difference": str(self.difference),
        }


class AlreadyReversedError(LedgerError):
    kind = "already_reversed"


class ClosedPeriodError(LedgerError):
    kind = "closed_period"


class InvalidDateRangeError(LedgerError):
    kind = "invalid_date_range"


class FinancialYearError(LedgerError):
    kind = "financial_year"


class ConcurrentModificationError(LedgerError):
    """Raised once a posting has lost every retry against concurrent writers."""
    kind = "concurrent_modification"

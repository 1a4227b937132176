"""
Shared enumerations for database models.

Using Python enums mapped to database enums ensures that
only valid values can be stored. An invalid account group
or voucher type is caught at the database level, not just
in Python validation.
"""

import enum


class AccountGroup(str, enum.Enum):
    """The five top-level groups of the chart of accounts."""
    ASSETS = "Assets"
    LIABILITIES = "Liabilities"
    INCOME = "Income"
    EXPENSES = "Expenses"
    CAPITAL = "Capital"

    @property
    def natural_side(self) -> "BalanceSide":
        """Assets and Expenses are naturally Dr, everything else Cr."""
        if self in (AccountGroup.ASSETS, AccountGroup.EXPENSES):
            return BalanceSide.DR
        return BalanceSide.CR


class BalanceSide(str, enum.Enum):
    """Side of a balance or of a ledger entry."""
    DR = "Dr"
    CR = "Cr"

    @property
    def opposite(self) -> "BalanceSide":
        return BalanceSide.CR if self is BalanceSide.DR else BalanceSide.DR


class VoucherType(str, enum.Enum):
    PAYMENT = "Payment"
    RECEIPT = "Receipt"
    JOURNAL = "Journal"
    CONTRA = "Contra"
    SALES = "Sales"
    PURCHASE = "Purchase"
    DEBIT_NOTE = "Debit Note"
    CREDIT_NOTE = "Credit Note"


# Voucher number prefixes, e.g. "PV-000124"
VOUCHER_PREFIXES: dict[VoucherType, str] = {
    VoucherType.PAYMENT: "PV",
    VoucherType.RECEIPT: "RV",
    VoucherType.JOURNAL: "JV",
    VoucherType.CONTRA: "CV",
    VoucherType.SALES: "SV",
    VoucherType.PURCHASE: "PU",
    VoucherType.DEBIT_NOTE: "DN",
    VoucherType.CREDIT_NOTE: "CN",
}


# The fixed sub-classifications allowed under each group.
# An account's type must be a member of its group's list.
ACCOUNT_TYPES_BY_GROUP: dict[AccountGroup, tuple[str, ...]] = {
    AccountGroup.ASSETS: (
        "Current Assets",
        "Fixed Assets",
        "Bank Account",
        "Cash",
        "Sundry Debtors",
    ),
    AccountGroup.LIABILITIES: (
        "Current Liabilities",
        "Sundry Creditors",
        "Loans",
        "Provisions",
        "Duties & Taxes",
    ),
    AccountGroup.INCOME: (
        "Direct Income",
        "Indirect Income",
    ),
    AccountGroup.EXPENSES: (
        "Direct Expenses",
        "Indirect Expenses",
    ),
    AccountGroup.CAPITAL: (
        "Capital Account",
    ),
}

CASH_ACCOUNT_TYPE = "Cash"
BANK_ACCOUNT_TYPE = "Bank Account"

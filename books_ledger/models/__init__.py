"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from books_ledger.models.base import Base
from books_ledger.models.enums import (
    AccountGroup,
    BalanceSide,
    VoucherType,
    ACCOUNT_TYPES_BY_GROUP,
    VOUCHER_PREFIXES,
)
from books_ledger.models.audit_log import AuditLog
from books_ledger.models.account import Account
from books_ledger.models.voucher import Voucher, VoucherLine
from books_ledger.models.voucher_sequence import VoucherSequence
from books_ledger.models.financial_year import FinancialYear

__all__ = [
    "Base",
    "AccountGroup",
    "BalanceSide",
    "VoucherType",
    "ACCOUNT_TYPES_BY_GROUP",
    "VOUCHER_PREFIXES",
    "AuditLog",
    "Account",
    "Voucher",
    "VoucherLine",
    "VoucherSequence",
    "FinancialYear",
]

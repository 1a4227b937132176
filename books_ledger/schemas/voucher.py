"""
Pydantic schemas for vouchers.

Amounts are rounded to 2 places as they enter the system,
so the balance check always compares already-rounded values.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from books_ledger.models.balance import quantize
from books_ledger.models.enums import VoucherType


# --- Request Schemas ---

class VoucherLineCreate(BaseModel):
    """A single debit or credit of a voucher."""
    account_id: int
    debit: Decimal = Field(default=Decimal("0.00"), ge=0)
    credit: Decimal = Field(default=Decimal("0.00"), ge=0)
    narration: str = Field(default="", max_length=255)

    @field_validator("debit", "credit")
    @classmethod
    def round_amount(cls, v: Decimal) -> Decimal:
        return quantize(v)


class VoucherDraft(BaseModel):
    """
    A proposed transaction.

    Line count, line shape and balance are not enforced here:
    the VoucherValidator checks them in a fixed order and
    reports a specific error for each.
    """
    voucher_type: VoucherType
    date: date
    lines: list[VoucherLineCreate]
    reference_number: str | None = Field(default=None, max_length=50)
    cheque_number: str | None = Field(default=None, max_length=30)
    cheque_date: date | None = None
    narration: str = Field(default="", max_length=500)


class VoucherPost(VoucherDraft):
    """A draft plus the user committing it."""
    created_by: str = Field(min_length=1, max_length=100)


class VoucherReverse(BaseModel):
    created_by: str = Field(min_length=1, max_length=100)
    reversal_date: date | None = None


@dataclass(frozen=True)
class ValidVoucher:
    """
    A draft that passed validation.

    Only the VoucherValidator creates these; the posting engine
    accepts nothing else.
    """
    draft: VoucherDraft
    total_debit: Decimal
    total_credit: Decimal
    account_ids: frozenset[int]


# --- Response Schemas ---

class VoucherLineResponse(BaseModel):
    line_number: int
    account_id: int
    account_code: str
    account_name: str
    debit: Decimal
    credit: Decimal
    narration: str


class VoucherResponse(BaseModel):
    id: int
    voucher_number: str
    voucher_type: VoucherType
    date: date
    financial_year: str
    reference_number: str | None
    cheque_number: str | None
    cheque_date: date | None
    narration: str
    total_debit: Decimal
    total_credit: Decimal
    created_by: str
    reversal_of_id: int | None
    created_at: datetime
    lines: list[VoucherLineResponse]

    @classmethod
    def from_voucher(cls, voucher) -> "VoucherResponse":
        return cls(
            id=voucher.id,
            voucher_number=voucher.voucher_number,
            voucher_type=voucher.voucher_type,
            date=voucher.date,
            financial_year=voucher.financial_year,
            reference_number=voucher.reference_number,
            cheque_number=voucher.cheque_number,
            cheque_date=voucher.cheque_date,
            narration=voucher.narration,
            total_debit=voucher.total_debit,
            total_credit=voucher.total_credit,
            created_by=voucher.created_by,
            reversal_of_id=voucher.reversal_of_id,
            created_at=voucher.created_at,
            lines=[
                VoucherLineResponse(
                    line_number=line.line_number,
                    account_id=line.account_id,
                    account_code=line.account.code,
                    account_name=line.account.name,
                    debit=line.debit,
                    credit=line.credit,
                    narration=line.narration,
                )
                for line in voucher.lines
            ],
        )


class VoucherPage(BaseModel):
    vouchers: list[VoucherResponse]
    total: int
    page: int
    total_pages: int


class VoucherCheck(BaseModel):
    """Result of a speculative validation: nothing is written."""
    is_valid: bool
    total_debit: Decimal
    total_credit: Decimal
    difference: Decimal
    error: str | None = None
    message: str | None = None


class VoucherFilter(BaseModel):
    voucher_type: VoucherType | None = None
    from_date: date | None = None
    to_date: date | None = None
    account_id: int | None = None
    financial_year: str | None = None
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=100, ge=1, le=1000)

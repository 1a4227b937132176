"""
Voucher and voucher line models.

A voucher is one balanced financial transaction; its lines are
the individual debits and credits. Vouchers are immutable: a
mistake is corrected by posting a reversing voucher, never by
editing or deleting the original.
"""

import datetime as dt
from decimal import Decimal

from sqlalchemy import (
    String, Date, DateTime, Integer, Numeric, ForeignKey,
    UniqueConstraint, Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from books_ledger.models.base import Base
from books_ledger.models.enums import VoucherType


class Voucher(Base):
    """
    An immutable, balanced transaction.

    The voucher number is allocated per voucher type from
    voucher_sequences, so "PV-000007" and "RV-000007" can
    both exist while numbers within a type never repeat.
    """

    __tablename__ = "vouchers"
    __table_args__ = (
        UniqueConstraint(
            "voucher_type", "sequence_number",
            name="uq_voucher_type_sequence",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    voucher_type: Mapped[VoucherType] = mapped_column(
        SAEnum(VoucherType, name="voucher_type_enum", create_constraint=True),
        nullable=False,
        index=True,
    )
    sequence_number: Mapped[int] = mapped_column(Integer, nullable=False)
    voucher_number: Mapped[str] = mapped_column(
        String(30), unique=True, nullable=False
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    financial_year: Mapped[str] = mapped_column(
        String(10), nullable=False, index=True
    )
    reference_number: Mapped[str | None] = mapped_column(
        String(50), nullable=True
    )
    cheque_number: Mapped[str | None] = mapped_column(
        String(30), nullable=True
    )
    cheque_date: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    narration: Mapped[str] = mapped_column(
        String(500), nullable=False, default=""
    )
    total_debit: Mapped[Decimal] = mapped_column(
        Numeric(19, 2), nullable=False
    )
    total_credit: Mapped[Decimal] = mapped_column(
        Numeric(19, 2), nullable=False
    )
    created_by: Mapped[str] = mapped_column(String(100), nullable=False)
    # A voucher can be reversed at most once
    reversal_of_id: Mapped[int | None] = mapped_column(
        ForeignKey("vouchers.id"), nullable=True, unique=True
    )
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime, nullable=False, default=dt.datetime.utcnow
    )

    lines: Mapped[list["VoucherLine"]] = relationship(
        back_populates="voucher",
        order_by="VoucherLine.line_number",
    )
    reversal_of: Mapped["Voucher | None"] = relationship(
        remote_side=[id]
    )

    def __repr__(self) -> str:
        return (
            f"<Voucher {self.voucher_number} {self.date} "
            f"{self.total_debit}>"
        )


class VoucherLine(Base):
    """
    One debit or credit of a voucher.

    Exactly one of debit/credit is non-zero. The balance rule
    (sum of debits == sum of credits per voucher) is enforced
    by the VoucherValidator before a voucher is ever written.
    """

    __tablename__ = "voucher_lines"

    id: Mapped[int] = mapped_column(primary_key=True)
    voucher_id: Mapped[int] = mapped_column(
        ForeignKey("vouchers.id"), nullable=False, index=True
    )
    line_number: Mapped[int] = mapped_column(Integer, nullable=False)
    account_id: Mapped[int] = mapped_column(
        ForeignKey("accounts.id"), nullable=False, index=True
    )
    debit: Mapped[Decimal] = mapped_column(
        Numeric(19, 2), nullable=False, default=Decimal("0.00")
    )
    credit: Mapped[Decimal] = mapped_column(
        Numeric(19, 2), nullable=False, default=Decimal("0.00")
    )
    narration: Mapped[str] = mapped_column(
        String(255), nullable=False, default=""
    )

    voucher: Mapped[Voucher] = relationship(back_populates="lines")
    account: Mapped["Account"] = relationship()

    def __repr__(self) -> str:
        return (
            f"<VoucherLine {self.account_id} "
            f"Dr {self.debit} Cr {self.credit}>"
        )

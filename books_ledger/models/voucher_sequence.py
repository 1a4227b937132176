"""
Voucher number counters.

One row per voucher type. Numbers are allocated with a single
conditional increment (UPDATE ... WHERE next_value = :seen),
so two concurrent postings can never take the same number.
"""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from books_ledger.models.base import Base
from books_ledger.models.enums import VoucherType


class VoucherSequence(Base):
    __tablename__ = "voucher_sequences"

    voucher_type: Mapped[VoucherType] = mapped_column(
        SAEnum(VoucherType, name="voucher_type_enum"),
        primary_key=True,
    )
    next_value: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=1
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<VoucherSequence {self.voucher_type.value} next={self.next_value}>"

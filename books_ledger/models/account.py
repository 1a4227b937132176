"""
Account model (chart of accounts).

Every ledger bucket (cash, bank, salaries payable, sales, ...)
is an Account. Vouchers post against accounts.

current_balance/current_balance_side are maintained by the
posting engine only. The version column is an optimistic
concurrency stamp: every UPDATE is issued as
"... WHERE id = :id AND version = :seen", so two postings
racing on the same account cannot both win.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    String, Boolean, DateTime, Integer, Numeric, Text,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column

from books_ledger.models.balance import Balance
from books_ledger.models.base import Base
from books_ledger.models.enums import AccountGroup, BalanceSide


class Account(Base):
    """
    A single account in the chart of accounts.

    Once an account has postings it is never deleted,
    only deactivated via is_active=False.
    """

    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(primary_key=True)
    code: Mapped[str] = mapped_column(
        String(20), unique=True, nullable=False
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    group: Mapped[AccountGroup] = mapped_column(
        SAEnum(AccountGroup, name="account_group_enum", create_constraint=True),
        nullable=False,
        index=True,
    )
    account_type: Mapped[str] = mapped_column(String(50), nullable=False)
    parent_group: Mapped[str | None] = mapped_column(
        String(100), nullable=True, default=None
    )
    description: Mapped[str] = mapped_column(
        Text, nullable=False, default=""
    )
    opening_balance: Mapped[Decimal] = mapped_column(
        Numeric(19, 2), nullable=False, default=Decimal("0.00")
    )
    opening_balance_side: Mapped[BalanceSide] = mapped_column(
        SAEnum(BalanceSide, name="balance_side_enum"),
        nullable=False,
    )
    current_balance: Mapped[Decimal] = mapped_column(
        Numeric(19, 2), nullable=False, default=Decimal("0.00")
    )
    current_balance_side: Mapped[BalanceSide] = mapped_column(
        SAEnum(BalanceSide, name="balance_side_enum"),
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, index=True
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    __mapper_args__ = {"version_id_col": version}

    @property
    def natural_side(self) -> BalanceSide:
        return self.group.natural_side

    @property
    def opening(self) -> Balance:
        return Balance.from_side(self.opening_balance, self.opening_balance_side)

    @property
    def balance(self) -> Balance:
        return Balance.from_side(self.current_balance, self.current_balance_side)

    def set_balance(self, balance: Balance) -> None:
        """Store a signed balance as a non-negative magnitude plus a side."""
        self.current_balance, self.current_balance_side = balance.normalized(
            self.group
        )

    def __repr__(self) -> str:
        return f"<Account {self.code} ({self.group.value}/{self.account_type})>"

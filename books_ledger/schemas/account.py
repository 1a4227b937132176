"""
Pydantic schemas for chart-of-accounts operations.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from books_ledger.models.balance import quantize
from books_ledger.models.enums import AccountGroup, BalanceSide


class AccountCreate(BaseModel):
    """Request to create a ledger account."""
    code: str = Field(min_length=1, max_length=20)
    name: str = Field(min_length=1, max_length=100)
    group: AccountGroup
    account_type: str = Field(min_length=1, max_length=50)
    opening_balance: Decimal = Field(default=Decimal("0.00"), ge=0)
    opening_balance_side: BalanceSide | None = None
    parent_group: str | None = Field(default=None, max_length=100)
    description: str = Field(default="", max_length=1000)

    @field_validator("code", "name")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("opening_balance")
    @classmethod
    def round_opening_balance(cls, v: Decimal) -> Decimal:
        return quantize(v)


class AccountUpdate(BaseModel):
    """
    Partial update of an account's master data.

    Balances are not part of this schema: current_balance is
    owned by the posting engine.
    """
    code: str | None = Field(default=None, min_length=1, max_length=20)
    name: str | None = Field(default=None, min_length=1, max_length=100)
    group: AccountGroup | None = None
    account_type: str | None = Field(default=None, min_length=1, max_length=50)
    opening_balance: Decimal | None = Field(default=None, ge=0)
    opening_balance_side: BalanceSide | None = None
    parent_group: str | None = Field(default=None, max_length=100)
    description: str | None = Field(default=None, max_length=1000)

    @field_validator("opening_balance")
    @classmethod
    def round_opening_balance(cls, v: Decimal | None) -> Decimal | None:
        return None if v is None else quantize(v)


class AccountResponse(BaseModel):
    id: int
    code: str
    name: str
    group: AccountGroup
    account_type: str
    parent_group: str | None
    description: str
    opening_balance: Decimal
    opening_balance_side: BalanceSide
    current_balance: Decimal
    current_balance_side: BalanceSide
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AccountGroupsResponse(BaseModel):
    groups: dict[AccountGroup, list[str]]

"""
Account service: the chart of accounts.

Creates, edits and soft-deletes ledger accounts. Balances are
never written here after creation; current_balance belongs to
the posting engine.
"""

import logging

from sqlalchemy import select, func, or_
from sqlalchemy.orm import Session

from books_ledger.exceptions import (
    AccountInUseError,
    DuplicateCodeError,
    InvalidGroupTypeError,
    NotFoundError,
)
from books_ledger.models.account import Account
from books_ledger.models.balance import Balance
from books_ledger.models.enums import AccountGroup, ACCOUNT_TYPES_BY_GROUP
from books_ledger.models.voucher import VoucherLine
from books_ledger.schemas.account import AccountCreate, AccountUpdate
from books_ledger.services.audit import record_event

logger = logging.getLogger(__name__)


def check_group_type(group: AccountGroup, account_type: str) -> None:
    allowed = ACCOUNT_TYPES_BY_GROUP[group]
    if account_type not in allowed:
        raise InvalidGroupTypeError(
            f"Account type '{account_type}' is not valid for group "
            f"{group.value}; expected one of: {', '.join(allowed)}"
        )


class AccountService:

    def __init__(self, db: Session):
        self.db = db

    def _code_taken(self, code: str, exclude_id: int | None = None) -> bool:
        stmt = select(Account.id).where(Account.code == code)
        if exclude_id is not None:
            stmt = stmt.where(Account.id != exclude_id)
        return self.db.execute(stmt.limit(1)).scalar_one_or_none() is not None

    def create_account(self, request: AccountCreate) -> Account:
        """
        Create a ledger account.

        The code must be unique across active and inactive accounts,
        and the account type must belong to the group. The opening
        balance is stored in canonical form (a zero opening takes the
        group's natural side) and current balance starts equal to it.
        """
        if self._code_taken(request.code):
            raise DuplicateCodeError(
                f"Account with code '{request.code}' already exists"
            )
        check_group_type(request.group, request.account_type)

        side = request.opening_balance_side or request.group.natural_side
        opening = Balance.from_side(request.opening_balance, side)
        magnitude, side = opening.normalized(request.group)

        account = Account(
            code=request.code,
            name=request.name,
            group=request.group,
            account_type=request.account_type,
            parent_group=request.parent_group,
            description=request.description,
            opening_balance=magnitude,
            opening_balance_side=side,
            current_balance=magnitude,
            current_balance_side=side,
            is_active=True,
        )
        self.db.add(account)
        self.db.flush()

        record_event(self.db, "account_created", {
            "account_id": account.id,
            "code": account.code,
            "group": account.group.value,
            "opening_balance": magnitude,
            "opening_side": side.value,
        })
        logger.info("Created account %s (%s)", account.code, account.group.value)
        return account

    def get_account(self, account_id: int) -> Account:
        account = self.db.get(Account, account_id)
        if not account:
            raise NotFoundError(f"Account {account_id} not found")
        return account

    def get_by_code(self, code: str) -> Account:
        account = self.db.execute(
            select(Account).where(Account.code == code)
        ).scalar_one_or_none()
        if not account:
            raise NotFoundError(f"Account '{code}' not found")
        return account

    def has_postings(self, account_id: int) -> bool:
        """True once any voucher line references the account."""
        found = self.db.execute(
            select(VoucherLine.id)
            .where(VoucherLine.account_id == account_id)
            .limit(1)
        ).scalar_one_or_none()
        return found is not None

    def update_account(self, account_id: int, request: AccountUpdate) -> Account:
        """
        Edit an account's master data.

        Once an account has postings its code, group and opening
        balance are frozen, since changing them would rewrite the
        meaning of history. Name, type (within the group),
        parent group and description may always change.
        """
        account = self.get_account(account_id)
        changes = request.model_dump(exclude_unset=True)

        group = changes.get("group") or account.group
        account_type = changes.get("account_type") or account.account_type

        frozen = {
            key for key in ("code", "group", "opening_balance", "opening_balance_side")
            if key in changes and changes[key] is not None
            and changes[key] != getattr(account, key)
        }
        if frozen and self.has_postings(account.id):
            raise AccountInUseError(
                f"Account {account.code} has postings; cannot change "
                f"{', '.join(sorted(frozen))}"
            )

        if "code" in frozen and self._code_taken(changes["code"], account.id):
            raise DuplicateCodeError(
                f"Account with code '{changes['code']}' already exists"
            )
        if "group" in frozen or "account_type" in changes:
            check_group_type(group, account_type)

        for key in ("code", "name", "account_type"):
            if changes.get(key) is not None:
                setattr(account, key, changes[key])
        for key in ("parent_group", "description"):
            if key in changes:
                value = changes[key]
                if key == "description" and value is None:
                    value = ""
                setattr(account, key, value)
        account.group = group

        if frozen & {"group", "opening_balance", "opening_balance_side"}:
            # No postings yet, so current balance is just the opening.
            magnitude = changes.get("opening_balance")
            if magnitude is None:
                magnitude = account.opening_balance
            side = changes.get("opening_balance_side") or account.opening_balance_side
            opening = Balance.from_side(magnitude, side)
            account.opening_balance, account.opening_balance_side = (
                opening.normalized(group)
            )
            account.set_balance(opening)

        self.db.flush()
        record_event(self.db, "account_updated", {
            "account_id": account.id,
            "fields": sorted(changes),
        })
        logger.info("Updated account %s: %s", account.code, sorted(changes))
        return account

    def deactivate(self, account_id: int) -> Account:
        """Soft delete. Balances and history are untouched."""
        account = self.get_account(account_id)
        if account.is_active:
            account.is_active = False
            self.db.flush()
            record_event(self.db, "account_deactivated", {"account_id": account.id})
            logger.info("Deactivated account %s", account.code)
        return account

    def activate(self, account_id: int) -> Account:
        account = self.get_account(account_id)
        if not account.is_active:
            account.is_active = True
            self.db.flush()
            record_event(self.db, "account_activated", {"account_id": account.id})
            logger.info("Activated account %s", account.code)
        return account

    def list_accounts(
        self,
        group: AccountGroup | None = None,
        account_type: str | None = None,
        active_only: bool = False,
        query: str | None = None,
    ) -> list[Account]:
        """Filter the chart of accounts, ordered by code."""
        stmt = select(Account)
        if group is not None:
            stmt = stmt.where(Account.group == group)
        if account_type:
            stmt = stmt.where(Account.account_type == account_type)
        if active_only:
            stmt = stmt.where(Account.is_active.is_(True))
        if query:
            # % and _ in the search text match literally
            term = (
                query.strip().lower()
                .replace("\\", "\\\\")
                .replace("%", "\\%")
                .replace("_", "\\_")
            )
            pattern = f"%{term}%"
            stmt = stmt.where(or_(
                func.lower(Account.code).like(pattern, escape="\\"),
                func.lower(Account.name).like(pattern, escape="\\"),
            ))
        accounts = self.db.execute(stmt.order_by(Account.code)).scalars().all()
        return list(accounts)

    @staticmethod
    def account_groups() -> dict[AccountGroup, list[str]]:
        return {
            group: list(types)
            for group, types in ACCOUNT_TYPES_BY_GROUP.items()
        }

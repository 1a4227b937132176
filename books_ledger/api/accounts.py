"""
Chart of accounts endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from books_ledger.api.errors import to_http_exception
from books_ledger.exceptions import LedgerError
from books_ledger.models.base import get_db
from books_ledger.models.enums import AccountGroup
from books_ledger.services.account_service import AccountService
from books_ledger.schemas.account import (
    AccountCreate,
    AccountGroupsResponse,
    AccountResponse,
    AccountUpdate,
)

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.post("", response_model=AccountResponse, status_code=201)
def create_account(
    request: AccountCreate,
    db: Session = Depends(get_db),
):
    """
    Create a ledger account.

    The opening balance side defaults to the group's natural
    side (Dr for assets and expenses, Cr otherwise).
    """
    service = AccountService(db)
    try:
        account = service.create_account(request)
        db.commit()
        return account
    except LedgerError as e:
        db.rollback()
        raise to_http_exception(e)


@router.get("", response_model=list[AccountResponse])
def list_accounts(
    group: AccountGroup | None = None,
    account_type: str | None = None,
    active_only: bool = False,
    query: str | None = None,
    db: Session = Depends(get_db),
):
    """List accounts ordered by code, optionally filtered."""
    service = AccountService(db)
    return service.list_accounts(
        group=group,
        account_type=account_type,
        active_only=active_only,
        query=query,
    )


@router.get("/groups", response_model=AccountGroupsResponse)
def account_groups():
    """The account types allowed under each group."""
    return AccountGroupsResponse(groups=AccountService.account_groups())


@router.get("/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: int,
    db: Session = Depends(get_db),
):
    service = AccountService(db)
    try:
        return service.get_account(account_id)
    except LedgerError as e:
        raise to_http_exception(e)


@router.patch("/{account_id}", response_model=AccountResponse)
def update_account(
    account_id: int,
    request: AccountUpdate,
    db: Session = Depends(get_db),
):
    """
    Edit an account.

    Code, group and opening balance are frozen once the account
    has postings.
    """
    service = AccountService(db)
    try:
        account = service.update_account(account_id, request)
        db.commit()
        return account
    except LedgerError as e:
        db.rollback()
        raise to_http_exception(e)


@router.post("/{account_id}/deactivate", response_model=AccountResponse)
def deactivate_account(
    account_id: int,
    db: Session = Depends(get_db),
):
    """Soft delete: the account stays in history but takes no new postings."""
    service = AccountService(db)
    try:
        account = service.deactivate(account_id)
        db.commit()
        return account
    except LedgerError as e:
        db.rollback()
        raise to_http_exception(e)


@router.post("/{account_id}/activate", response_model=AccountResponse)
def activate_account(
    account_id: int,
    db: Session = Depends(get_db),
):
    service = AccountService(db)
    try:
        account = service.activate(account_id)
        db.commit()
        return account
    except LedgerError as e:
        db.rollback()
        raise to_http_exception(e)

"""
Voucher endpoints.

Posting and reversal go through PostingService, which owns the
retry loop; the route only commits what it returns. Vouchers are
never updated or deleted, so there are no PATCH/DELETE routes.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from books_ledger.api.errors import to_http_exception
from books_ledger.exceptions import LedgerError
from books_ledger.models.base import get_db
from books_ledger.services.posting_service import PostingService, total_pages
from books_ledger.services.voucher_validator import VoucherValidator
from books_ledger.schemas.voucher import (
    VoucherCheck,
    VoucherDraft,
    VoucherFilter,
    VoucherPage,
    VoucherPost,
    VoucherResponse,
    VoucherReverse,
)

router = APIRouter(prefix="/vouchers", tags=["Vouchers"])


@router.post("", response_model=VoucherResponse, status_code=201)
def post_voucher(
    request: VoucherPost,
    db: Session = Depends(get_db),
):
    """
    Validate and post a voucher.

    On success the voucher has its number and every touched
    account's balance is updated. On failure nothing is written.
    """
    service = PostingService(db)
    try:
        voucher = service.post(request, created_by=request.created_by)
        db.commit()
        return VoucherResponse.from_voucher(voucher)
    except LedgerError as e:
        db.rollback()
        raise to_http_exception(e)


@router.post("/check", response_model=VoucherCheck)
def check_voucher(
    request: VoucherDraft,
    db: Session = Depends(get_db),
):
    """Report whether a draft would post, without writing anything."""
    return VoucherValidator(db).check(request)


@router.get("", response_model=VoucherPage)
def list_vouchers(
    filters: VoucherFilter = Depends(),
    db: Session = Depends(get_db),
):
    """List vouchers newest first."""
    service = PostingService(db)
    try:
        vouchers, total = service.list_vouchers(filters)
    except LedgerError as e:
        raise to_http_exception(e)
    return VoucherPage(
        vouchers=[VoucherResponse.from_voucher(v) for v in vouchers],
        total=total,
        page=filters.page,
        total_pages=total_pages(total, filters.limit),
    )


@router.get("/{voucher_id}", response_model=VoucherResponse)
def get_voucher(
    voucher_id: int,
    db: Session = Depends(get_db),
):
    service = PostingService(db)
    try:
        return VoucherResponse.from_voucher(service.get_voucher(voucher_id))
    except LedgerError as e:
        raise to_http_exception(e)


@router.post(
    "/{voucher_id}/reverse",
    response_model=VoucherResponse,
    status_code=201,
)
def reverse_voucher(
    voucher_id: int,
    request: VoucherReverse,
    db: Session = Depends(get_db),
):
    """
    Reverse a voucher by posting its mirror image.

    The original is left untouched. A voucher can only be
    reversed once.
    """
    service = PostingService(db)
    try:
        reversal = service.reverse(
            voucher_id,
            created_by=request.created_by,
            reversal_date=request.reversal_date,
        )
        db.commit()
        return VoucherResponse.from_voucher(reversal)
    except LedgerError as e:
        db.rollback()
        raise to_http_exception(e)

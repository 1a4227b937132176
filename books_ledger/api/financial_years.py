"""
Financial year endpoints.
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from books_ledger.api.errors import to_http_exception
from books_ledger.exceptions import LedgerError
from books_ledger.models.base import get_db
from books_ledger.services.financial_year_service import FinancialYearService
from books_ledger.schemas.financial_year import (
    FinancialYearCreate,
    FinancialYearResponse,
)

router = APIRouter(prefix="/financial-years", tags=["Financial Years"])


@router.post("", response_model=FinancialYearResponse, status_code=201)
def create_financial_year(
    request: FinancialYearCreate,
    db: Session = Depends(get_db),
):
    """Create a year. It becomes the active year."""
    service = FinancialYearService(db)
    try:
        year = service.create(request)
        db.commit()
        return year
    except LedgerError as e:
        db.rollback()
        raise to_http_exception(e)


@router.get("", response_model=list[FinancialYearResponse])
def list_financial_years(db: Session = Depends(get_db)):
    return FinancialYearService(db).list_years()


@router.get("/{year_id}", response_model=FinancialYearResponse)
def get_financial_year(
    year_id: int,
    db: Session = Depends(get_db),
):
    try:
        return FinancialYearService(db).get(year_id)
    except LedgerError as e:
        raise to_http_exception(e)


@router.post("/{year_id}/activate", response_model=FinancialYearResponse)
def activate_financial_year(
    year_id: int,
    db: Session = Depends(get_db),
):
    service = FinancialYearService(db)
    try:
        year = service.set_active(year_id)
        db.commit()
        return year
    except LedgerError as e:
        db.rollback()
        raise to_http_exception(e)


@router.post("/{year_id}/close", response_model=FinancialYearResponse)
def close_financial_year(
    year_id: int,
    actor: str | None = None,
    db: Session = Depends(get_db),
):
    """Close a year: vouchers dated inside it are refused from now on."""
    service = FinancialYearService(db)
    try:
        year = service.close(year_id, actor=actor)
        db.commit()
        return year
    except LedgerError as e:
        db.rollback()
        raise to_http_exception(e)


@router.post("/{year_id}/reopen", response_model=FinancialYearResponse)
def reopen_financial_year(
    year_id: int,
    actor: str | None = None,
    db: Session = Depends(get_db),
):
    service = FinancialYearService(db)
    try:
        year = service.reopen(year_id, actor=actor)
        db.commit()
        return year
    except LedgerError as e:
        db.rollback()
        raise to_http_exception(e)


@router.delete("/{year_id}", status_code=204)
def delete_financial_year(
    year_id: int,
    db: Session = Depends(get_db),
):
    service = FinancialYearService(db)
    try:
        service.delete(year_id)
        db.commit()
    except LedgerError as e:
        db.rollback()
        raise to_http_exception(e)
    return Response(status_code=204)

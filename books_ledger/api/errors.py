"""
Mapping of ledger errors onto HTTP responses.

The body carries the error kind and message, plus whatever
structured fields the error has (e.g. the signed difference of
an unbalanced voucher).
"""

from fastapi import HTTPException

from books_ledger.exceptions import (
    ConcurrentModificationError,
    LedgerError,
    NotFoundError,
)


def to_http_exception(error: LedgerError) -> HTTPException:
    if isinstance(error, NotFoundError):
        status_code = 404
    elif isinstance(error, ConcurrentModificationError):
        status_code = 409
    else:
        status_code = 400
    return HTTPException(status_code=status_code, detail=error.to_dict())

"""
Books Ledger FastAPI application.

This is the entry point for the application.
All routers are registered here.
"""

import logging

from fastapi import FastAPI

from books_ledger.config import get_settings
from books_ledger.api.health import router as health_router
from books_ledger.api.accounts import router as accounts_router
from books_ledger.api.vouchers import router as vouchers_router
from books_ledger.api.reports import router as reports_router
from books_ledger.api.financial_years import router as financial_years_router

settings = get_settings()


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


configure_logging()

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Double-entry ledger for a payroll back office",
    debug=settings.DEBUG,
)

# Register routers
app.include_router(health_router)
app.include_router(accounts_router)
app.include_router(vouchers_router)
app.include_router(reports_router)
app.include_router(financial_years_router)

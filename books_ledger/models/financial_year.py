"""
Financial year model.

Years partition the books into accounting periods. A closed
year refuses new postings dated inside it.
"""

from datetime import date, datetime

from sqlalchemy import String, Boolean, Date, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column

from books_ledger.models.base import Base


class FinancialYear(Base):
    __tablename__ = "financial_years"

    id: Mapped[int] = mapped_column(primary_key=True)
    year_code: Mapped[str] = mapped_column(
        String(20), unique=True, nullable=False
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    end_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    is_closed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    closing_date: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True, default=None
    )
    description: Mapped[str] = mapped_column(
        Text, nullable=False, default=""
    )
    created_by: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def __repr__(self) -> str:
        state = "closed" if self.is_closed else "open"
        return f"<FinancialYear {self.year_code} ({state})>"

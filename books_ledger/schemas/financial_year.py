"""
Pydantic schemas for financial years.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field


class FinancialYearCreate(BaseModel):
    year_code: str = Field(min_length=1, max_length=20)
    start_date: date
    end_date: date
    description: str = Field(default="", max_length=1000)
    created_by: str = Field(min_length=1, max_length=100)


class FinancialYearResponse(BaseModel):
    id: int
    year_code: str
    start_date: date
    end_date: date
    is_active: bool
    is_closed: bool
    closing_date: datetime | None
    description: str
    created_by: str
    created_at: datetime

    model_config = {"from_attributes": True}

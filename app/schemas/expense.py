# app/schemas/expense.py
from typing import List, Literal, Optional
from pydantic import BaseModel, Field, field_validator, model_validator
from datetime import datetime, timezone
from decimal import Decimal
import uuid

from app.schemas.common import AMOUNT_MAX, AMOUNT_MIN, Description, Money, Pagination, ReceiptUrl


def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _not_in_future(value: datetime) -> datetime:
    value = _to_naive_utc(value)
    if value > datetime.utcnow():
        raise ValueError("Expense date cannot be in the future")
    return value


class ExpenseBase(BaseModel):
    amount: Decimal = Field(..., ge=AMOUNT_MIN, le=AMOUNT_MAX, decimal_places=2)
    description: Description
    category_id: uuid.UUID
    date: datetime = Field(..., description="ISO 8601 date/time of the expense")
    receipt_url: Optional[ReceiptUrl] = None

    @field_validator("date")
    @classmethod
    def check_date(cls, value: datetime) -> datetime:
        return _not_in_future(value)


class ExpenseCreate(ExpenseBase):
    team_id: Optional[uuid.UUID] = None


class ExpenseUpdate(BaseModel):
    amount: Optional[Decimal] = Field(None, ge=AMOUNT_MIN, le=AMOUNT_MAX, decimal_places=2)
    description: Optional[Description] = None
    category_id: Optional[uuid.UUID] = None
    date: Optional[datetime] = None
    receipt_url: Optional[ReceiptUrl] = None
    # Explicit null moves the expense back to the creator's personal scope
    team_id: Optional[uuid.UUID] = None

    @field_validator("date")
    @classmethod
    def check_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is None:
            return value
        return _not_in_future(value)

    @model_validator(mode="after")
    def required_fields_not_null(self):
        for name in ("amount", "description", "category_id", "date"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class ExpenseRead(BaseModel):
    id: uuid.UUID
    user_id: Optional[uuid.UUID] = None
    team_id: Optional[uuid.UUID] = None
    category_id: uuid.UUID
    amount: Money
    description: str
    date: datetime
    receipt_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DateRangeQuery(BaseModel):
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _to_naive_utc(value) if value is not None else value


class ExpenseSummaryQuery(DateRangeQuery):
    team_id: Optional[uuid.UUID] = None


class ExpenseQuery(DateRangeQuery):
    page: int = Field(1, ge=1, le=10000)
    limit: int = Field(10, ge=1, le=100)
    category_id: Optional[uuid.UUID] = None
    team_id: Optional[uuid.UUID] = None
    sort_by: Literal["date", "amount", "description", "created_at"] = "date"
    sort_order: Literal["asc", "desc"] = "desc"

    @model_validator(mode="after")
    def check_range(self):
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("Start date must be before or equal to end date")
        return self


class ExpenseList(BaseModel):
    expenses: List[ExpenseRead]
    pagination: Pagination


class CategoryTotal(BaseModel):
    category_id: uuid.UUID
    category_name: str
    total: Money
    count: int


class ExpenseSummary(BaseModel):
    total: Money
    count: int
    by_category: List[CategoryTotal]

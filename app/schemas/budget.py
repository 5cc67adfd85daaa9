# app/schemas/budget.py
from typing import Annotated, Optional
from datetime import date, datetime
from decimal import Decimal
from pydantic import BaseModel, Field, StringConstraints, model_validator
import uuid

from app.schemas.common import AMOUNT_MAX, AMOUNT_MIN, Money

BudgetName = Annotated[str, StringConstraints(strip_whitespace=True, max_length=100)]


class BudgetCreate(BaseModel):
    name: Optional[BudgetName] = None
    amount: Decimal = Field(..., ge=AMOUNT_MIN, le=AMOUNT_MAX, decimal_places=2)
    category_id: uuid.UUID
    start_date: date
    end_date: date
    team_id: Optional[uuid.UUID] = None

    @model_validator(mode="after")
    def check_range(self):
        if self.start_date > self.end_date:
            raise ValueError("start_date must be on or before end_date")
        return self


class BudgetUpdate(BaseModel):
    name: Optional[BudgetName] = None
    amount: Optional[Decimal] = Field(None, ge=AMOUNT_MIN, le=AMOUNT_MAX, decimal_places=2)
    category_id: Optional[uuid.UUID] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @model_validator(mode="after")
    def required_fields_not_null(self):
        for name in ("amount", "category_id", "start_date", "end_date"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class BudgetRead(BaseModel):
    id: uuid.UUID
    name: Optional[str] = None
    amount: Money
    category_id: uuid.UUID
    start_date: date
    end_date: date
    user_id: Optional[uuid.UUID] = None
    team_id: Optional[uuid.UUID] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BudgetProgress(BaseModel):
    budget_id: uuid.UUID
    amount: Money
    spent: Money
    remaining: Money
    progress_percentage: float
    status: str

# app/schemas/recurring_expense.py
from typing import Optional
from pydantic import BaseModel, Field, model_validator
from datetime import datetime
from decimal import Decimal
import uuid

from app.models.recurring_expense import FrequencyType
from app.schemas.common import AMOUNT_MAX, AMOUNT_MIN, Description, Money


class RecurringExpenseCreate(BaseModel):
    amount: Decimal = Field(..., ge=AMOUNT_MIN, le=AMOUNT_MAX, decimal_places=2)
    description: Description
    category_id: uuid.UUID
    frequency: FrequencyType = FrequencyType.monthly
    next_due_date: datetime
    is_active: bool = True
    team_id: Optional[uuid.UUID] = None


class RecurringExpenseUpdate(BaseModel):
    amount: Optional[Decimal] = Field(None, ge=AMOUNT_MIN, le=AMOUNT_MAX, decimal_places=2)
    description: Optional[Description] = None
    category_id: Optional[uuid.UUID] = None
    frequency: Optional[FrequencyType] = None
    next_due_date: Optional[datetime] = None
    is_active: Optional[bool] = None
    team_id: Optional[uuid.UUID] = None

    @model_validator(mode="after")
    def required_fields_not_null(self):
        for name in ("amount", "description", "category_id", "frequency", "next_due_date", "is_active"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class RecurringExpenseRead(BaseModel):
    id: uuid.UUID
    user_id: Optional[uuid.UUID] = None
    team_id: Optional[uuid.UUID] = None
    category_id: uuid.UUID
    amount: Money
    description: str
    frequency: FrequencyType
    next_due_date: datetime
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

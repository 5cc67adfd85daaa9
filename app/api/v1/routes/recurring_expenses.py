# app/api/v1/routes/recurring_expenses.py
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import uuid

from app.schemas.recurring_expense import (
    RecurringExpenseCreate,
    RecurringExpenseRead,
    RecurringExpenseUpdate,
)
from app.services.expenses import RecurringExpenseService
from app.core.database import get_async_session
from app.core.security import Principal
from app.api.deps import get_current_principal

router = APIRouter()

@router.get("", response_model=List[RecurringExpenseRead])
async def read_recurring_expenses(
    team_id: Optional[uuid.UUID] = Query(None),
    db: AsyncSession = Depends(get_async_session),
    principal: Principal = Depends(get_current_principal),
):
    return await RecurringExpenseService(db, principal).list(team_id=team_id)

@router.post("", response_model=RecurringExpenseRead, status_code=status.HTTP_201_CREATED)
async def create_recurring_expense(
    recurring_in: RecurringExpenseCreate,
    db: AsyncSession = Depends(get_async_session),
    principal: Principal = Depends(get_current_principal),
):
    return await RecurringExpenseService(db, principal).create(recurring_in)

@router.get("/{recurring_id}", response_model=RecurringExpenseRead)
async def read_recurring_expense(
    recurring_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    principal: Principal = Depends(get_current_principal),
):
    return await RecurringExpenseService(db, principal).get(recurring_id)

@router.patch("/{recurring_id}", response_model=RecurringExpenseRead)
async def update_recurring_expense_endpoint(
    recurring_id: uuid.UUID,
    recurring_in: RecurringExpenseUpdate,
    db: AsyncSession = Depends(get_async_session),
    principal: Principal = Depends(get_current_principal),
):
    return await RecurringExpenseService(db, principal).update(recurring_id, recurring_in)

@router.delete("/{recurring_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recurring_expense_endpoint(
    recurring_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    principal: Principal = Depends(get_current_principal),
):
    await RecurringExpenseService(db, principal).delete(recurring_id)
    return None

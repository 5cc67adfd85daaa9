# app/api/v1/routes/expenses.py
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Annotated
import uuid

from app.schemas.expense import (
    ExpenseCreate,
    ExpenseList,
    ExpenseQuery,
    ExpenseRead,
    ExpenseSummary,
    ExpenseSummaryQuery,
    ExpenseUpdate,
)
from app.services.expenses import ExpenseService
from app.core.database import get_async_session
from app.core.errors import ValidationFailure
from app.core.security import Principal
from app.api.deps import get_current_principal

router = APIRouter()

@router.get("", response_model=ExpenseList)
async def read_expenses(
    query: Annotated[ExpenseQuery, Query()],
    db: AsyncSession = Depends(get_async_session),
    principal: Principal = Depends(get_current_principal),
):
    """
    List the caller's personal expenses plus the expenses of every team they belong to.

    - **category_id / team_id**: narrow the list
    - **start_date / end_date**: inclusive date range
    - **page / limit**: pagination (limit 1..100)
    - **sort_by / sort_order**: date, amount, description or created_at; asc or desc
    """
    return await ExpenseService(db, principal).list(query)

@router.get("/summary", response_model=ExpenseSummary)
async def read_expense_summary(
    query: Annotated[ExpenseSummaryQuery, Query()],
    db: AsyncSession = Depends(get_async_session),
    principal: Principal = Depends(get_current_principal),
):
    """Totals per category over the visible expenses."""
    if query.start_date and query.end_date and query.start_date > query.end_date:
        raise ValidationFailure("Start date must be before or equal to end date")
    return await ExpenseService(db, principal).summary(
        start_date=query.start_date, end_date=query.end_date, team_id=query.team_id
    )

@router.post("", response_model=ExpenseRead, status_code=status.HTTP_201_CREATED)
async def create_expense(
    expense_in: ExpenseCreate,
    db: AsyncSession = Depends(get_async_session),
    principal: Principal = Depends(get_current_principal),
):
    return await ExpenseService(db, principal).create(expense_in)

@router.get("/{expense_id}", response_model=ExpenseRead)
async def read_expense(
    expense_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    principal: Principal = Depends(get_current_principal),
):
    return await ExpenseService(db, principal).get(expense_id)

@router.patch("/{expense_id}", response_model=ExpenseRead)
async def update_expense_endpoint(
    expense_id: uuid.UUID,
    expense_in: ExpenseUpdate,
    db: AsyncSession = Depends(get_async_session),
    principal: Principal = Depends(get_current_principal),
):
    """Update an expense. Sending `"team_id": null` moves it back to the creator's personal expenses."""
    return await ExpenseService(db, principal).update(expense_id, expense_in)

@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_expense_endpoint(
    expense_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    principal: Principal = Depends(get_current_principal),
):
    await ExpenseService(db, principal).delete(expense_id)
    return None

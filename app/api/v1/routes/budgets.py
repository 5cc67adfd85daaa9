# app/api/v1/routes/budgets.py
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import uuid

from app.schemas.budget import BudgetCreate, BudgetProgress, BudgetRead, BudgetUpdate
from app.services.budgets import BudgetService
from app.core.database import get_async_session
from app.core.security import Principal
from app.api.deps import get_current_principal

router = APIRouter()

@router.get("", response_model=List[BudgetRead])
async def read_budgets(
    team_id: Optional[uuid.UUID] = Query(None),
    db: AsyncSession = Depends(get_async_session),
    principal: Principal = Depends(get_current_principal),
):
    return await BudgetService(db, principal).list(team_id=team_id)

@router.post("", response_model=BudgetRead, status_code=status.HTTP_201_CREATED)
async def create_budget(
    budget_in: BudgetCreate,
    db: AsyncSession = Depends(get_async_session),
    principal: Principal = Depends(get_current_principal),
):
    return await BudgetService(db, principal).create(budget_in)

@router.get("/{budget_id}", response_model=BudgetRead)
async def read_budget(
    budget_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    principal: Principal = Depends(get_current_principal),
):
    return await BudgetService(db, principal).get(budget_id)

@router.get("/{budget_id}/progress", response_model=BudgetProgress)
async def read_budget_progress(
    budget_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    principal: Principal = Depends(get_current_principal),
):
    """
    Spending against a budget.

    Counts the expenses in the budget's own scope, for its category, between
    start_date and end_date inclusive. Status is "On Track", "Near Limit"
    (90% or more spent) or "Over Budget".
    """
    return await BudgetService(db, principal).progress(budget_id)

@router.patch("/{budget_id}", response_model=BudgetRead)
async def update_budget_endpoint(
    budget_id: uuid.UUID,
    budget_in: BudgetUpdate,
    db: AsyncSession = Depends(get_async_session),
    principal: Principal = Depends(get_current_principal),
):
    return await BudgetService(db, principal).update(budget_id, budget_in)

@router.delete("/{budget_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_budget_endpoint(
    budget_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    principal: Principal = Depends(get_current_principal),
):
    await BudgetService(db, principal).delete(budget_id)
    return None

# app/crud/budget.py
from datetime import datetime, time, timedelta
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func
from app.models.budget import Budget
from app.models.expense import Expense
from app.crud.visibility import visible_to
from typing import Any, Dict, List, Optional
import uuid

async def get_budgets_for_user(user_id: uuid.UUID, db: AsyncSession, team_id: Optional[uuid.UUID] = None) -> List[Budget]:
    stmt = select(Budget).where(visible_to(Budget, user_id))
    if team_id is not None:
        stmt = stmt.where(Budget.team_id == team_id)
    result = await db.execute(stmt.order_by(Budget.start_date.desc(), Budget.id))
    return result.scalars().all()

async def get_budget_by_id(budget_id: uuid.UUID, db: AsyncSession) -> Optional[Budget]:
    result = await db.execute(select(Budget).where(Budget.id == budget_id))
    return result.scalar_one_or_none()

async def create_budget(values: Dict[str, Any], db: AsyncSession) -> Budget:
    new_budget = Budget(**values)
    db.add(new_budget)
    await db.commit()
    await db.refresh(new_budget)
    return new_budget

async def update_budget(budget: Budget, changes: Dict[str, Any], db: AsyncSession) -> Budget:
    for field, value in changes.items():
        setattr(budget, field, value)
    db.add(budget)
    await db.commit()
    await db.refresh(budget)
    return budget

async def delete_budget(budget: Budget, db: AsyncSession) -> None:
    await db.delete(budget)
    await db.commit()

async def get_spent_for_budget(budget: Budget, db: AsyncSession) -> Decimal:
    """Sum of the expenses in the budget's own scope, category and (inclusive) date range."""
    stmt = select(func.coalesce(func.sum(Expense.amount), 0)).where(
        Expense.category_id == budget.category_id,
        Expense.date >= datetime.combine(budget.start_date, time.min),
        Expense.date < datetime.combine(budget.end_date + timedelta(days=1), time.min),
    )
    if budget.team_id is not None:
        stmt = stmt.where(Expense.team_id == budget.team_id)
    else:
        stmt = stmt.where(Expense.team_id.is_(None), Expense.user_id == budget.user_id)
    result = await db.execute(stmt)
    return Decimal(str(result.scalar_one() or 0))

# app/crud/expense.py
from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func
from app.models.category import Category
from app.models.expense import Expense
from app.crud.visibility import visible_to
from typing import Any, Dict, List, Optional, Tuple
import uuid

SORT_COLUMNS = {
    "date": Expense.date,
    "amount": Expense.amount,
    "description": Expense.description,
    "created_at": Expense.created_at,
}

def _visible_expenses(
    user_id: uuid.UUID,
    category_id: Optional[uuid.UUID] = None,
    team_id: Optional[uuid.UUID] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
):
    conditions = [visible_to(Expense, user_id)]
    if category_id is not None:
        conditions.append(Expense.category_id == category_id)
    if team_id is not None:
        conditions.append(Expense.team_id == team_id)
    if start_date is not None:
        conditions.append(Expense.date >= start_date)
    if end_date is not None:
        conditions.append(Expense.date <= end_date)
    return conditions

async def get_expenses_for_user(
    user_id: uuid.UUID,
    db: AsyncSession,
    page: int = 1,
    limit: int = 10,
    sort_by: str = "date",
    sort_order: str = "desc",
    **filters: Any,
) -> Tuple[List[Expense], int]:
    conditions = _visible_expenses(user_id, **filters)

    total_result = await db.execute(select(func.count()).select_from(Expense).where(*conditions))
    total = total_result.scalar_one() or 0

    column = SORT_COLUMNS[sort_by]
    ordering = column.asc() if sort_order == "asc" else column.desc()
    result = await db.execute(
        select(Expense)
        .where(*conditions)
        .order_by(ordering, Expense.id)
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return result.scalars().all(), total

async def get_expense_by_id(expense_id: uuid.UUID, db: AsyncSession) -> Optional[Expense]:
    result = await db.execute(select(Expense).where(Expense.id == expense_id))
    return result.scalar_one_or_none()

async def create_expense(values: Dict[str, Any], db: AsyncSession) -> Expense:
    new_ex = Expense(**values)
    db.add(new_ex)
    await db.commit()
    await db.refresh(new_ex)
    return new_ex

async def update_expense(expense: Expense, changes: Dict[str, Any], db: AsyncSession) -> Expense:
    for field, value in changes.items():
        setattr(expense, field, value)
    db.add(expense)
    await db.commit()
    await db.refresh(expense)
    return expense

async def delete_expense(expense: Expense, db: AsyncSession) -> None:
    await db.delete(expense)
    await db.commit()

async def get_category_totals_for_user(
    user_id: uuid.UUID,
    db: AsyncSession,
    **filters: Any,
) -> List[Tuple[uuid.UUID, str, Any, int]]:
    """(category_id, category_name, total, count) over the expenses visible to the user."""
    conditions = _visible_expenses(user_id, **filters)
    result = await db.execute(
        select(
            Expense.category_id,
            Category.name,
            func.coalesce(func.sum(Expense.amount), 0),
            func.count(Expense.id),
        )
        .join(Category, Category.id == Expense.category_id)
        .where(*conditions)
        .group_by(Expense.category_id, Category.name)
        .order_by(Category.name)
    )
    return [tuple(row) for row in result.all()]

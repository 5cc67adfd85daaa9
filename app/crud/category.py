# app/crud/category.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func, or_
from app.models.budget import Budget
from app.models.category import Category
from app.models.expense import Expense
from app.models.recurring_expense import RecurringExpense
from app.crud.visibility import visible_categories
from typing import Any, Dict, List, Optional
import uuid

# Everything that may point at a category through category_id
REFERENCING_MODELS = (Expense, Budget, RecurringExpense)

async def get_category_by_id(category_id: uuid.UUID, db: AsyncSession) -> Optional[Category]:
    result = await db.execute(select(Category).where(Category.id == category_id))
    return result.scalar_one_or_none()

async def get_readable_category(category_id: uuid.UUID, user_id: uuid.UUID, db: AsyncSession) -> Optional[Category]:
    """The category, if it exists and the user may read it (default, own, or one of their teams')."""
    result = await db.execute(
        select(Category).where(Category.id == category_id, visible_categories(user_id))
    )
    return result.scalar_one_or_none()

async def get_categories_for_user(
    user_id: uuid.UUID,
    db: AsyncSession,
    team_id: Optional[uuid.UUID] = None,
    include_default: bool = True,
) -> List[Category]:
    stmt = select(Category).where(visible_categories(user_id, include_default))
    if team_id is not None:
        stmt = stmt.where(Category.team_id == team_id)
    result = await db.execute(stmt.order_by(Category.name, Category.id))
    return result.scalars().all()

async def count_categories_for_owner(db: AsyncSession, user_id: Optional[uuid.UUID] = None, team_id: Optional[uuid.UUID] = None) -> int:
    stmt = select(func.count()).select_from(Category)
    if user_id is not None:
        stmt = stmt.where(Category.user_id == user_id)
    if team_id is not None:
        stmt = stmt.where(Category.team_id == team_id)
    result = await db.execute(stmt)
    return result.scalar_one() or 0

async def create_category(values: Dict[str, Any], db: AsyncSession, commit: bool = True) -> Category:
    new_cat = Category(**values)
    db.add(new_cat)
    if commit:
        await db.commit()
        await db.refresh(new_cat)
    else:
        await db.flush()
    return new_cat

async def update_category(category: Category, changes: Dict[str, Any], db: AsyncSession) -> Category:
    for field, value in changes.items():
        setattr(category, field, value)
    db.add(category)
    await db.commit()
    await db.refresh(category)
    return category

async def delete_category(category: Category, db: AsyncSession) -> None:
    await db.delete(category)
    await db.commit()

async def count_category_references(
    category_ids,
    db: AsyncSession,
    outside_team_id: Optional[uuid.UUID] = None,
    team_scoped_only: bool = False,
) -> int:
    """Count expenses, budgets and recurring templates pointing at any of ``category_ids``.

    ``category_ids`` may be a list or a select of ids. ``outside_team_id``
    ignores rows belonging to that team; ``team_scoped_only`` ignores
    personal rows.
    """
    total = 0
    for model in REFERENCING_MODELS:
        stmt = select(func.count()).select_from(model).where(model.category_id.in_(category_ids))
        if outside_team_id is not None:
            stmt = stmt.where(or_(model.team_id.is_(None), model.team_id != outside_team_id))
        if team_scoped_only:
            stmt = stmt.where(model.team_id.is_not(None))
        result = await db.execute(stmt)
        total += result.scalar_one() or 0
    return total

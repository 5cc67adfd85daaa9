# app/crud/user.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import delete, func, update
from app.core.auth import User
from app.models.budget import Budget
from app.models.category import Category
from app.models.expense import Expense
from app.models.recurring_expense import RecurringExpense
from app.models.team import TeamMember
from typing import Optional
import uuid

async def get_user_by_email(email: str, db: AsyncSession) -> Optional[User]:
    result = await db.execute(select(User).where(func.lower(User.email) == func.lower(email)))
    return result.scalar_one_or_none()

async def get_user_by_id(user_id: uuid.UUID, db: AsyncSession) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()

async def update_user_fields(user: User, full_name: Optional[str], db: AsyncSession) -> User:
    user.full_name = full_name
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user

async def delete_user_account(user_id: uuid.UUID, db: AsyncSession) -> None:
    """Remove a user with their personal data; their team contributions stay with the team."""
    for model in (Expense, RecurringExpense):
        await db.execute(delete(model).where(model.user_id == user_id, model.team_id.is_(None)))
    await db.execute(delete(Budget).where(Budget.user_id == user_id))
    await db.execute(delete(Category).where(Category.user_id == user_id))
    for model in (Expense, RecurringExpense):
        await db.execute(update(model).where(model.user_id == user_id).values(user_id=None))
    await db.execute(delete(TeamMember).where(TeamMember.user_id == user_id))
    await db.execute(delete(User).where(User.id == user_id))
    await db.commit()

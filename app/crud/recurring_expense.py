# app/crud/recurring_expense.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from app.models.recurring_expense import RecurringExpense
from app.crud.visibility import visible_to
from typing import Any, Dict, List, Optional
import uuid

async def get_recurring_expenses_for_user(user_id: uuid.UUID, db: AsyncSession, team_id: Optional[uuid.UUID] = None) -> List[RecurringExpense]:
    stmt = select(RecurringExpense).where(visible_to(RecurringExpense, user_id))
    if team_id is not None:
        stmt = stmt.where(RecurringExpense.team_id == team_id)
    result = await db.execute(stmt.order_by(RecurringExpense.next_due_date, RecurringExpense.id))
    return result.scalars().all()

async def get_recurring_expense_by_id(recurring_id: uuid.UUID, db: AsyncSession) -> Optional[RecurringExpense]:
    result = await db.execute(select(RecurringExpense).where(RecurringExpense.id == recurring_id))
    return result.scalar_one_or_none()

async def create_recurring_expense(values: Dict[str, Any], db: AsyncSession) -> RecurringExpense:
    new_rec = RecurringExpense(**values)
    db.add(new_rec)
    await db.commit()
    await db.refresh(new_rec)
    return new_rec

async def update_recurring_expense(recurring: RecurringExpense, changes: Dict[str, Any], db: AsyncSession) -> RecurringExpense:
    for field, value in changes.items():
        setattr(recurring, field, value)
    db.add(recurring)
    await db.commit()
    await db.refresh(recurring)
    return recurring

async def delete_recurring_expense(recurring: RecurringExpense, db: AsyncSession) -> None:
    await db.delete(recurring)
    await db.commit()

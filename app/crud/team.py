# app/crud/team.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import delete, func
from typing import List, Optional, Tuple
import uuid

from app.core.auth import User
from app.models.budget import Budget
from app.models.category import Category
from app.models.expense import Expense
from app.models.recurring_expense import RecurringExpense
from app.models.team import Team, TeamMember, TeamRole

async def role_of(user_id: uuid.UUID, team_id: uuid.UUID, db: AsyncSession) -> Optional[TeamRole]:
    """Current role of a user in a team, or None when not a member (or the team is gone).

    Selects the bare column so an already-loaded TeamMember in the session can
    never mask a role change committed elsewhere.
    """
    result = await db.execute(
        select(TeamMember.role).where(TeamMember.user_id == user_id, TeamMember.team_id == team_id)
    )
    return result.scalar_one_or_none()

async def get_team_by_id(team_id: uuid.UUID, db: AsyncSession) -> Optional[Team]:
    result = await db.execute(select(Team).where(Team.id == team_id))
    return result.scalar_one_or_none()

async def get_teams_for_user(user_id: uuid.UUID, db: AsyncSession) -> List[Tuple[Team, TeamRole]]:
    result = await db.execute(
        select(Team, TeamMember.role)
        .join(TeamMember, TeamMember.team_id == Team.id)
        .where(TeamMember.user_id == user_id)
        .order_by(Team.name)
    )
    return [(team, role) for team, role in result.all()]

async def create_team(name: str, db: AsyncSession) -> Team:
    """Insert a team without committing; the caller owns the transaction."""
    team = Team(name=name)
    db.add(team)
    await db.flush()
    return team

async def add_member(team_id: uuid.UUID, user_id: uuid.UUID, role: TeamRole, db: AsyncSession, commit: bool = True) -> TeamMember:
    member = TeamMember(team_id=team_id, user_id=user_id, role=role)
    db.add(member)
    if commit:
        await db.commit()
        await db.refresh(member)
    else:
        await db.flush()
    return member

async def get_member(team_id: uuid.UUID, user_id: uuid.UUID, db: AsyncSession) -> Optional[TeamMember]:
    result = await db.execute(
        select(TeamMember).where(TeamMember.team_id == team_id, TeamMember.user_id == user_id)
    )
    return result.scalar_one_or_none()

async def get_members(team_id: uuid.UUID, db: AsyncSession) -> List[Tuple[TeamMember, User]]:
    result = await db.execute(
        select(TeamMember, User)
        .join(User, User.id == TeamMember.user_id)
        .where(TeamMember.team_id == team_id)
        .order_by(TeamMember.created_at, User.email)
    )
    return [(member, user) for member, user in result.all()]

async def count_admins(team_id: uuid.UUID, db: AsyncSession) -> int:
    result = await db.execute(
        select(func.count())
        .select_from(TeamMember)
        .where(TeamMember.team_id == team_id, TeamMember.role == TeamRole.ADMIN)
    )
    return result.scalar_one() or 0

async def update_member_role(member: TeamMember, role: TeamRole, db: AsyncSession) -> TeamMember:
    member.role = role
    db.add(member)
    await db.commit()
    await db.refresh(member)
    return member

async def remove_member(member: TeamMember, db: AsyncSession) -> None:
    await db.delete(member)
    await db.commit()

async def rename_team(team: Team, name: str, db: AsyncSession) -> Team:
    team.name = name
    db.add(team)
    await db.commit()
    await db.refresh(team)
    return team

async def delete_team(team: Team, db: AsyncSession) -> None:
    """Delete a team and everything scoped to it, children first."""
    for model in (Expense, RecurringExpense, Budget, Category):
        await db.execute(delete(model).where(model.team_id == team.id))
    await db.execute(delete(TeamMember).where(TeamMember.team_id == team.id))
    await db.delete(team)
    await db.commit()

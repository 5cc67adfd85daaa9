# app/services/users.py
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import Conflict
from app.core.security import Principal
from app.crud.category import count_category_references
from app.crud.user import delete_user_account
from app.models.category import Category
from app.models.team import Team, TeamMember, TeamRole

logger = logging.getLogger(__name__)


async def sole_admin_teams(principal: Principal, db: AsyncSession):
    """Names of teams where the principal is the only ADMIN."""
    admins = (
        select(TeamMember.team_id, func.count().label("admins"))
        .where(TeamMember.role == TeamRole.ADMIN)
        .group_by(TeamMember.team_id)
        .subquery()
    )
    result = await db.execute(
        select(Team.name)
        .join(TeamMember, TeamMember.team_id == Team.id)
        .join(admins, admins.c.team_id == Team.id)
        .where(
            TeamMember.user_id == principal.user_id,
            TeamMember.role == TeamRole.ADMIN,
            admins.c.admins == 1,
        )
        .order_by(Team.name)
    )
    return result.scalars().all()


async def delete_account(principal: Principal, db: AsyncSession) -> None:
    """
    Delete the principal's account.

    Personal data goes with it. Expenses and recurring templates the user
    added to teams stay with those teams, without a creator.
    """
    teams = await sole_admin_teams(principal, db)
    if teams:
        raise Conflict(f"Assign another admin or delete these teams first: {', '.join(teams)}")

    personal_categories = select(Category.id).where(Category.user_id == principal.user_id)
    if await count_category_references(personal_categories, db, team_scoped_only=True):
        raise Conflict("Personal categories are still used by team records")

    await delete_user_account(principal.user_id, db)
    logger.info(f"Deleted account {principal.user_id}")

# app/services/teams.py
import logging
import uuid
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import User
from app.core.errors import Conflict, Forbidden, NotFound
from app.core.permissions import MembershipAction, Operation, evaluate_membership, evaluate_team
from app.core.security import Principal
from app.crud import team as crud_team
from app.crud.category import count_category_references
from app.crud.user import get_user_by_email
from app.models.category import Category
from app.models.team import Team, TeamMember, TeamRole
from app.schemas.team import MemberInvite, TeamMemberRead, TeamRead
from .provisioning import OwnerKind, ensure_defaults

logger = logging.getLogger(__name__)


def member_view(member: TeamMember, user: User) -> TeamMemberRead:
    return TeamMemberRead(
        user_id=member.user_id,
        email=user.email,
        full_name=user.full_name,
        role=member.role,
        created_at=member.created_at,
    )


class TeamService:
    """Teams, and the memberships that hand out roles in them."""

    def __init__(self, db: AsyncSession, principal: Principal):
        self.db = db
        self.principal = principal

    async def _load(self, team_id: uuid.UUID, operation: Operation = Operation.READ) -> Tuple[Team, Optional[TeamRole]]:
        team = await crud_team.get_team_by_id(team_id, self.db)
        role = await crud_team.role_of(self.principal.user_id, team_id, self.db) if team else None
        # A missing team and a team the principal is not in look the same
        if team is None or not evaluate_team(Operation.READ, role):
            raise NotFound("Team not found")
        if operation is not Operation.READ:
            decision = evaluate_team(operation, role)
            if not decision:
                logger.info(f"Denied {operation.value} on team {team_id} for user {self.principal.user_id}: {decision.reason.value}")
                raise Forbidden("Only team admins can change or delete the team")
        return team, role

    async def _authorize_membership(
        self,
        team_id: uuid.UUID,
        action: MembershipAction,
        target_user_id: Optional[uuid.UUID] = None,
    ) -> None:
        _, role = await self._load(team_id)
        decision = evaluate_membership(self.principal, action, role, target_user_id)
        if not decision:
            logger.info(f"Denied {action.value} in team {team_id} for user {self.principal.user_id}: {decision.reason.value}")
            raise Forbidden("Only team admins can manage members")

    async def _guard_last_admin(self, member: TeamMember) -> None:
        if member.role is TeamRole.ADMIN and await crud_team.count_admins(member.team_id, self.db) <= 1:
            raise Conflict("A team must keep at least one admin")

    async def _member_or_404(self, team_id: uuid.UUID, user_id: uuid.UUID) -> TeamMember:
        member = await crud_team.get_member(team_id, user_id, self.db)
        if member is None:
            raise NotFound("Member not found")
        return member

    async def create(self, name: str) -> TeamRead:
        """Create a team with the principal as its first ADMIN, all or nothing."""
        try:
            team = await crud_team.create_team(name, self.db)
            await crud_team.add_member(team.id, self.principal.user_id, TeamRole.ADMIN, self.db, commit=False)
            await ensure_defaults(self.db, OwnerKind.TEAM, team.id, commit=False)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        await self.db.refresh(team)
        logger.info(f"User {self.principal.user_id} created team {team.id}")
        return TeamRead(id=team.id, name=team.name, role=TeamRole.ADMIN, created_at=team.created_at)

    async def list(self) -> List[TeamRead]:
        rows = await crud_team.get_teams_for_user(self.principal.user_id, self.db)
        return [TeamRead(id=t.id, name=t.name, role=role, created_at=t.created_at) for t, role in rows]

    async def get(self, team_id: uuid.UUID) -> TeamRead:
        team, role = await self._load(team_id)
        return TeamRead(id=team.id, name=team.name, role=role, created_at=team.created_at)

    async def rename(self, team_id: uuid.UUID, name: str) -> TeamRead:
        team, role = await self._load(team_id, Operation.UPDATE)
        team = await crud_team.rename_team(team, name, self.db)
        return TeamRead(id=team.id, name=team.name, role=role, created_at=team.created_at)

    async def delete(self, team_id: uuid.UUID) -> None:
        team, _ = await self._load(team_id, Operation.DELETE)
        team_categories = select(Category.id).where(Category.team_id == team.id)
        if await count_category_references(team_categories, self.db, outside_team_id=team.id):
            raise Conflict("Team categories are still used by records outside the team")
        await crud_team.delete_team(team, self.db)
        logger.info(f"User {self.principal.user_id} deleted team {team_id}")

    async def members(self, team_id: uuid.UUID) -> List[TeamMemberRead]:
        await self._load(team_id)
        return [member_view(m, u) for m, u in await crud_team.get_members(team_id, self.db)]

    async def invite(self, team_id: uuid.UUID, data: MemberInvite) -> TeamMemberRead:
        await self._authorize_membership(team_id, MembershipAction.INVITE)
        user = await get_user_by_email(data.email, self.db)
        if user is None:
            raise NotFound("User not found")
        if await crud_team.get_member(team_id, user.id, self.db) is not None:
            raise Conflict("User is already a member of this team")
        try:
            member = await crud_team.add_member(team_id, user.id, data.role, self.db)
        except IntegrityError:
            # Lost a race with a concurrent invite of the same user
            await self.db.rollback()
            raise Conflict("User is already a member of this team")
        logger.info(f"User {self.principal.user_id} added {user.id} to team {team_id} as {data.role.value}")
        return member_view(member, user)

    async def change_role(self, team_id: uuid.UUID, user_id: uuid.UUID, role: TeamRole) -> TeamMemberRead:
        await self._authorize_membership(team_id, MembershipAction.CHANGE_ROLE, user_id)
        member = await self._member_or_404(team_id, user_id)
        if role is not TeamRole.ADMIN:
            await self._guard_last_admin(member)
        member = await crud_team.update_member_role(member, role, self.db)
        logger.info(f"User {self.principal.user_id} set role of {user_id} in team {team_id} to {role.value}")
        user = await self.db.get(User, user_id)
        return member_view(member, user)

    async def remove_member(self, team_id: uuid.UUID, user_id: uuid.UUID) -> None:
        await self._authorize_membership(team_id, MembershipAction.REMOVE, user_id)
        member = await self._member_or_404(team_id, user_id)
        await self._guard_last_admin(member)
        await crud_team.remove_member(member, self.db)
        logger.info(f"User {self.principal.user_id} removed {user_id} from team {team_id}")

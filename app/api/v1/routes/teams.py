# app/api/v1/routes/teams.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import uuid

from app.schemas.team import (
    MemberInvite,
    MemberRoleUpdate,
    TeamCreate,
    TeamMemberRead,
    TeamRead,
    TeamUpdate,
)
from app.services.teams import TeamService
from app.core.database import get_async_session
from app.core.security import Principal
from app.api.deps import get_current_principal

router = APIRouter()

@router.get("", response_model=List[TeamRead])
async def read_teams(
    db: AsyncSession = Depends(get_async_session),
    principal: Principal = Depends(get_current_principal),
):
    """Teams the caller belongs to, with the caller's role in each."""
    return await TeamService(db, principal).list()

@router.post("", response_model=TeamRead, status_code=status.HTTP_201_CREATED)
async def create_team(
    team_in: TeamCreate,
    db: AsyncSession = Depends(get_async_session),
    principal: Principal = Depends(get_current_principal),
):
    """Create a team. The caller becomes its ADMIN and the team gets the default categories."""
    return await TeamService(db, principal).create(team_in.name)

@router.get("/{team_id}", response_model=TeamRead)
async def read_team(
    team_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    principal: Principal = Depends(get_current_principal),
):
    return await TeamService(db, principal).get(team_id)

@router.patch("/{team_id}", response_model=TeamRead)
async def update_team(
    team_id: uuid.UUID,
    team_in: TeamUpdate,
    db: AsyncSession = Depends(get_async_session),
    principal: Principal = Depends(get_current_principal),
):
    return await TeamService(db, principal).rename(team_id, team_in.name)

@router.delete("/{team_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_team(
    team_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    principal: Principal = Depends(get_current_principal),
):
    """Delete a team with its memberships and everything scoped to it (ADMIN only)."""
    await TeamService(db, principal).delete(team_id)
    return None

# Members
@router.get("/{team_id}/members", response_model=List[TeamMemberRead])
async def read_members(
    team_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    principal: Principal = Depends(get_current_principal),
):
    return await TeamService(db, principal).members(team_id)

@router.post("/{team_id}/members", response_model=TeamMemberRead, status_code=status.HTTP_201_CREATED)
async def invite_member(
    team_id: uuid.UUID,
    invite: MemberInvite,
    db: AsyncSession = Depends(get_async_session),
    principal: Principal = Depends(get_current_principal),
):
    """Add an existing user to the team by email (ADMIN only). Role defaults to VIEWER."""
    return await TeamService(db, principal).invite(team_id, invite)

@router.patch("/{team_id}/members/{user_id}", response_model=TeamMemberRead)
async def change_member_role(
    team_id: uuid.UUID,
    user_id: uuid.UUID,
    role_in: MemberRoleUpdate,
    db: AsyncSession = Depends(get_async_session),
    principal: Principal = Depends(get_current_principal),
):
    return await TeamService(db, principal).change_role(team_id, user_id, role_in.role)

@router.delete("/{team_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_member(
    team_id: uuid.UUID,
    user_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    principal: Principal = Depends(get_current_principal),
):
    """Remove a member (ADMIN only), or leave the team by passing your own id."""
    await TeamService(db, principal).remove_member(team_id, user_id)
    return None

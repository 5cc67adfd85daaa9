# app/schemas/team.py
from typing import Annotated, Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr, StringConstraints
import uuid

from app.models.team import TeamRole

TeamName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]


class TeamCreate(BaseModel):
    name: TeamName


class TeamUpdate(TeamCreate):
    pass


class TeamRead(BaseModel):
    id: uuid.UUID
    name: str
    role: TeamRole
    created_at: Optional[datetime] = None


class TeamMemberRead(BaseModel):
    user_id: uuid.UUID
    email: str
    full_name: Optional[str] = None
    role: TeamRole
    created_at: Optional[datetime] = None


class MemberInvite(BaseModel):
    email: EmailStr
    role: TeamRole = TeamRole.VIEWER


class MemberRoleUpdate(BaseModel):
    role: TeamRole

# app/models/team.py
import enum
import uuid
from datetime import datetime
from sqlalchemy import Column, String, ForeignKey, DateTime, Enum, UniqueConstraint, Uuid
from app.core.database import Base

class TeamRole(str, enum.Enum):
    ADMIN = "ADMIN"
    EDITOR = "EDITOR"
    VIEWER = "VIEWER"

class Team(Base):
    __tablename__ = "teams"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(length=100), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Team name={self.name}>"

class TeamMember(Base):
    __tablename__ = "team_members"
    __table_args__ = (
        UniqueConstraint("user_id", "team_id", name="uq_team_member_user_team"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    team_id = Column(Uuid(as_uuid=True), ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(Enum(TeamRole, name="teamrole"), nullable=False, default=TeamRole.VIEWER)

    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<TeamMember user_id={self.user_id} team_id={self.team_id} role={self.role}>"

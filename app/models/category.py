# app/models/category.py
import uuid
from datetime import datetime
from sqlalchemy import Column, String, ForeignKey, Boolean, DateTime, CheckConstraint, Uuid
from app.core.database import Base

class Category(Base):
    __tablename__ = "categories"
    __table_args__ = (
        # A default category is global seed data; every other category has exactly one owner
        CheckConstraint(
            "(is_default AND user_id IS NULL AND team_id IS NULL) OR "
            "(NOT is_default AND ((user_id IS NOT NULL AND team_id IS NULL) OR "
            "(user_id IS NULL AND team_id IS NOT NULL)))",
            name="ck_category_single_owner",
        ),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)
    team_id = Column(Uuid(as_uuid=True), ForeignKey("teams.id", ondelete="CASCADE"), nullable=True, index=True)
    name = Column(String(length=50), nullable=False)
    color = Column(String(length=7), nullable=False)
    icon = Column(String(length=50), nullable=True)
    is_default = Column(Boolean(), nullable=False, default=False)  # True for global seed categories

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Category name={self.name} user_id={self.user_id} team_id={self.team_id}>"

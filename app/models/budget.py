# app/models/budget.py
import uuid
from datetime import datetime
from sqlalchemy import Column, String, ForeignKey, Numeric, Date, DateTime, CheckConstraint, Uuid
from app.core.database import Base

class Budget(Base):
    __tablename__ = "budgets"
    __table_args__ = (
        CheckConstraint(
            "(user_id IS NOT NULL AND team_id IS NULL) OR (user_id IS NULL AND team_id IS NOT NULL)",
            name="ck_budget_single_owner",
        ),
        CheckConstraint("start_date <= end_date", name="ck_budget_date_range"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)
    team_id = Column(Uuid(as_uuid=True), ForeignKey("teams.id", ondelete="CASCADE"), nullable=True, index=True)
    category_id = Column(Uuid(as_uuid=True), ForeignKey("categories.id"), nullable=False, index=True)
    name = Column(String(length=100), nullable=True)
    amount = Column(Numeric(12, 2), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Budget amount={self.amount} category_id={self.category_id}>"

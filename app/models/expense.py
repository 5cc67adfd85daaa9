# app/models/expense.py
import uuid
from datetime import datetime
from sqlalchemy import Column, String, ForeignKey, Numeric, DateTime, Uuid
from app.core.database import Base

class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # Creator of the record. Cleared only when the creator's account is deleted
    # and the expense survives because it belongs to a team.
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    team_id = Column(Uuid(as_uuid=True), ForeignKey("teams.id", ondelete="CASCADE"), nullable=True, index=True)
    category_id = Column(Uuid(as_uuid=True), ForeignKey("categories.id"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(String(length=500), nullable=False)
    date = Column(DateTime, nullable=False)
    receipt_url = Column(String(length=2048), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Expense amount={self.amount} user_id={self.user_id} team_id={self.team_id}>"

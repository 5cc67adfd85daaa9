# app/models/recurring_expense.py
import uuid
import enum
from datetime import datetime
from sqlalchemy import Column, String, ForeignKey, Numeric, Boolean, DateTime, Enum, Uuid
from app.core.database import Base

class FrequencyType(str, enum.Enum):
    daily = "daily"
    weekly = "weekly"
    monthly = "monthly"
    yearly = "yearly"

class RecurringExpense(Base):
    __tablename__ = "recurring_expenses"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    team_id = Column(Uuid(as_uuid=True), ForeignKey("teams.id", ondelete="CASCADE"), nullable=True, index=True)
    category_id = Column(Uuid(as_uuid=True), ForeignKey("categories.id"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(String(length=500), nullable=False)
    frequency = Column(Enum(FrequencyType, name="frequencytype"), default=FrequencyType.monthly, nullable=False)
    next_due_date = Column(DateTime, nullable=False)
    # For "skipping" or "pausing" recurring bills
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<RecurringExpense amount={self.amount} frequency={self.frequency} team_id={self.team_id}>"

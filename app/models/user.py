# app/models/user.py
# Note: User is defined in core/auth.py next to its fastapi-users manager.
# Importing the module registers every table on Base.metadata.

from app.core.auth import User
from app.models.team import Team, TeamMember, TeamRole
from app.models.category import Category
from app.models.expense import Expense
from app.models.budget import Budget
from app.models.recurring_expense import RecurringExpense, FrequencyType

__all__ = [
    "User",
    "Team",
    "TeamMember",
    "TeamRole",
    "Category",
    "Expense",
    "Budget",
    "RecurringExpense",
    "FrequencyType",
]

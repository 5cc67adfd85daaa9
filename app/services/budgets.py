# app/services/budgets.py
import logging
import uuid
from decimal import Decimal
from typing import List, Optional

from app.core.errors import ValidationFailure
from app.core.permissions import Operation
from app.core.scope import owner_columns
from app.crud import budget as crud_budget
from app.models.budget import Budget
from app.schemas.budget import BudgetCreate, BudgetProgress, BudgetUpdate
from .access import ResourceAccessService

logger = logging.getLogger(__name__)

NEAR_LIMIT_RATIO = Decimal("0.9")


def budget_status(amount: Decimal, spent: Decimal) -> str:
    if spent > amount:
        return "Over Budget"
    if spent >= amount * NEAR_LIMIT_RATIO:
        return "Near Limit"
    return "On Track"


class BudgetService(ResourceAccessService):
    resource_name = "Budget"
    fetch = staticmethod(crud_budget.get_budget_by_id)

    async def list(self, team_id: Optional[uuid.UUID] = None) -> List[Budget]:
        return await crud_budget.get_budgets_for_user(self.principal.user_id, self.db, team_id=team_id)

    async def get(self, budget_id: uuid.UUID) -> Budget:
        return await self.load(budget_id)

    async def create(self, data: BudgetCreate) -> Budget:
        scope = await self.authorize_create(data.team_id)
        await self.check_category(data.category_id)
        values = data.model_dump(exclude={"team_id"})
        values.update(owner_columns(scope))
        budget = await crud_budget.create_budget(values, self.db)
        logger.info(f"User {self.principal.user_id} created budget {budget.id}")
        return budget

    async def update(self, budget_id: uuid.UUID, data: BudgetUpdate) -> Budget:
        budget = await self.load(budget_id, Operation.UPDATE)
        changes = data.model_dump(exclude_unset=True)

        start = changes.get("start_date", budget.start_date)
        end = changes.get("end_date", budget.end_date)
        if start > end:
            raise ValidationFailure("start_date must be on or before end_date")
        if "category_id" in changes and changes["category_id"] != budget.category_id:
            await self.check_category(changes["category_id"])

        return await crud_budget.update_budget(budget, changes, self.db)

    async def delete(self, budget_id: uuid.UUID) -> None:
        budget = await self.load(budget_id, Operation.DELETE)
        await crud_budget.delete_budget(budget, self.db)
        logger.info(f"User {self.principal.user_id} deleted budget {budget_id}")

    async def progress(self, budget_id: uuid.UUID) -> BudgetProgress:
        budget = await self.load(budget_id)
        amount = Decimal(budget.amount)
        spent = await crud_budget.get_spent_for_budget(budget, self.db)
        percentage = float(spent / amount * 100) if amount > 0 else 0.0
        return BudgetProgress(
            budget_id=budget.id,
            amount=amount,
            spent=spent,
            remaining=amount - spent,
            progress_percentage=round(min(100.0, percentage), 2),
            status=budget_status(amount, spent),
        )

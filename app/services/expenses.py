# app/services/expenses.py
import logging
import math
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from app.core.errors import Forbidden
from app.core.permissions import Operation
from app.crud import expense as crud_expense
from app.crud import recurring_expense as crud_recurring
from app.schemas.common import Pagination
from app.schemas.expense import CategoryTotal, ExpenseList, ExpenseQuery, ExpenseRead, ExpenseSummary
from .access import ResourceAccessService

logger = logging.getLogger(__name__)


class ContributionService(ResourceAccessService):
    """
    Records a user adds either for themselves or on behalf of a team.

    ``user_id`` always names the creator; ``team_id`` alone decides the
    scope, so moving a record between scopes only ever touches ``team_id``.
    """
    create_record = None
    update_record = None
    delete_record = None

    async def create(self, data) -> Any:
        await self.authorize_create(data.team_id)
        await self.check_category(data.category_id)
        values = data.model_dump()
        values["user_id"] = self.principal.user_id
        record = await self.create_record(values, self.db)
        logger.info(f"User {self.principal.user_id} created {self.resource_name} {record.id}")
        return record

    async def get(self, record_id: uuid.UUID) -> Any:
        return await self.load(record_id)

    async def update(self, record_id: uuid.UUID, data) -> Any:
        record = await self.load(record_id, Operation.UPDATE)
        changes: Dict[str, Any] = data.model_dump(exclude_unset=True)

        if "team_id" in changes and changes["team_id"] != record.team_id:
            await self._check_move(record, changes["team_id"])
        if "category_id" in changes and changes["category_id"] != record.category_id:
            await self.check_category(changes["category_id"])

        return await self.update_record(record, changes, self.db)

    async def delete(self, record_id: uuid.UUID) -> None:
        record = await self.load(record_id, Operation.DELETE)
        await self.delete_record(record, self.db)
        logger.info(f"User {self.principal.user_id} deleted {self.resource_name} {record_id}")

    async def _check_move(self, record: Any, new_team_id: Optional[uuid.UUID]) -> None:
        if new_team_id is None:
            # A personal record belongs to its creator; nobody else may claim it that way
            if record.user_id != self.principal.user_id:
                raise Forbidden(f"Only the creator can move this {self.resource_name.lower()} to personal scope")
            return
        await self.authorize_create(new_team_id)


class ExpenseService(ContributionService):
    resource_name = "Expense"
    fetch = staticmethod(crud_expense.get_expense_by_id)
    create_record = staticmethod(crud_expense.create_expense)
    update_record = staticmethod(crud_expense.update_expense)
    delete_record = staticmethod(crud_expense.delete_expense)

    async def list(self, query: ExpenseQuery) -> ExpenseList:
        expenses, total = await crud_expense.get_expenses_for_user(
            self.principal.user_id,
            self.db,
            page=query.page,
            limit=query.limit,
            sort_by=query.sort_by,
            sort_order=query.sort_order,
            category_id=query.category_id,
            team_id=query.team_id,
            start_date=query.start_date,
            end_date=query.end_date,
        )
        return ExpenseList(
            expenses=[ExpenseRead.model_validate(e) for e in expenses],
            pagination=Pagination(
                page=query.page,
                limit=query.limit,
                total=total,
                total_pages=math.ceil(total / query.limit) if total else 0,
            ),
        )

    async def summary(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        team_id: Optional[uuid.UUID] = None,
    ) -> ExpenseSummary:
        rows: List[Tuple] = await crud_expense.get_category_totals_for_user(
            self.principal.user_id,
            self.db,
            team_id=team_id,
            start_date=start_date,
            end_date=end_date,
        )
        by_category = [
            CategoryTotal(category_id=cat_id, category_name=name, total=Decimal(str(total)), count=count)
            for cat_id, name, total, count in rows
        ]
        return ExpenseSummary(
            total=sum((c.total for c in by_category), Decimal("0")),
            count=sum(c.count for c in by_category),
            by_category=by_category,
        )


class RecurringExpenseService(ContributionService):
    resource_name = "Recurring expense"
    fetch = staticmethod(crud_recurring.get_recurring_expense_by_id)
    create_record = staticmethod(crud_recurring.create_recurring_expense)
    update_record = staticmethod(crud_recurring.update_recurring_expense)
    delete_record = staticmethod(crud_recurring.delete_recurring_expense)

    async def list(self, team_id: Optional[uuid.UUID] = None):
        return await crud_recurring.get_recurring_expenses_for_user(self.principal.user_id, self.db, team_id=team_id)

# app/services/categories.py
import logging
import uuid
from typing import List, Optional

from app.core.errors import Conflict, Forbidden
from app.core.permissions import Operation
from app.core.scope import owner_columns
from app.crud import category as crud_category
from app.models.category import Category
from app.schemas.category import CategoryCreate, CategoryUpdate
from .access import ResourceAccessService

logger = logging.getLogger(__name__)


class CategoryService(ResourceAccessService):
    """Categories are owned by a user or a team for life; defaults are read-only for everyone."""
    resource_name = "Category"
    fetch = staticmethod(crud_category.get_category_by_id)

    async def list(self, team_id: Optional[uuid.UUID] = None, include_default: bool = True) -> List[Category]:
        return await crud_category.get_categories_for_user(
            self.principal.user_id, self.db, team_id=team_id, include_default=include_default
        )

    async def get(self, category_id: uuid.UUID) -> Category:
        return await self.load(category_id)

    async def create(self, data: CategoryCreate) -> Category:
        if data.is_default:
            raise Forbidden("Default categories are managed by the system")
        scope = await self.authorize_create(data.team_id)
        values = data.model_dump(exclude={"team_id", "is_default"})
        values.update(owner_columns(scope), is_default=False)
        category = await crud_category.create_category(values, self.db)
        logger.info(f"User {self.principal.user_id} created category {category.id}")
        return category

    async def update(self, category_id: uuid.UUID, data: CategoryUpdate) -> Category:
        category = await self.load(category_id, Operation.UPDATE)
        changes = data.model_dump(exclude_unset=True)
        is_default = changes.pop("is_default", None)
        if is_default is not None and is_default != category.is_default:
            raise Forbidden("Default categories are managed by the system")
        for name in ("name", "color"):
            if name in changes and changes[name] is None:
                changes.pop(name)
        return await crud_category.update_category(category, changes, self.db)

    async def delete(self, category_id: uuid.UUID) -> None:
        category = await self.load(category_id, Operation.DELETE)
        references = await crud_category.count_category_references([category.id], self.db)
        if references:
            raise Conflict("Cannot delete a category that is used by expenses, budgets or recurring expenses")
        await crud_category.delete_category(category, self.db)
        logger.info(f"User {self.principal.user_id} deleted category {category_id}")

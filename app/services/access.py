# app/services/access.py
"""
Shared plumbing for the resource access services.

Every service binds one request's session to one principal and funnels its
decisions through ``app.core.permissions``. Denials are turned into errors
here, and only here:

* the principal cannot even read the resource -> ``NotFound``
* it can read it, but not change it          -> ``Forbidden``
* a new resource aimed at a team it may not write to -> ``Forbidden``
* a referenced category it cannot read        -> ``ValidationFailure``
"""
import logging
import uuid
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import Forbidden, NotFound, ValidationFailure
from app.core.permissions import Decision, Operation, evaluate
from app.core.scope import Scope, TeamScope, intended_scope, scope_of
from app.core.security import Principal
from app.crud.category import get_readable_category
from app.crud.team import role_of
from app.models.category import Category
from app.models.team import TeamRole

logger = logging.getLogger(__name__)


class ResourceAccessService:
    resource_name = "Resource"
    # async (resource_id, db) -> resource | None
    fetch = None

    def __init__(self, db: AsyncSession, principal: Principal):
        self.db = db
        self.principal = principal

    async def role_in(self, scope: Scope) -> Optional[TeamRole]:
        if isinstance(scope, TeamScope):
            return await role_of(self.principal.user_id, scope.team_id, self.db)
        return None

    def _evaluate(self, resource: Any, scope: Scope, operation: Operation, role: Optional[TeamRole]) -> Decision:
        decision = evaluate(
            self.principal,
            scope,
            operation,
            role=role,
            owner_id=getattr(resource, "user_id", None),
        )
        if not decision:
            logger.info(
                f"Denied {operation.value} on {self.resource_name} {resource.id} "
                f"for user {self.principal.user_id}: {decision.reason.value}"
            )
        return decision

    async def load(self, resource_id: uuid.UUID, operation: Operation = Operation.READ) -> Any:
        resource = await self.fetch(resource_id, self.db)
        if resource is None:
            raise NotFound(f"{self.resource_name} not found")

        scope = scope_of(resource)
        decision = self._evaluate(resource, scope, operation, await self.role_in(scope))
        if not decision and decision.conceals_existence:
            raise NotFound(f"{self.resource_name} not found")
        if not decision:
            raise Forbidden(f"Insufficient permissions to {operation.value} this {self.resource_name.lower()}")
        return resource

    async def authorize_create(self, team_id: Optional[uuid.UUID]) -> Scope:
        """Resolve where a new resource goes; a refused team never falls back to personal."""
        scope = intended_scope(team_id, self.principal)
        decision = evaluate(self.principal, scope, Operation.CREATE, role=await self.role_in(scope))
        if not decision:
            logger.info(
                f"Denied create of {self.resource_name} in team {team_id} "
                f"for user {self.principal.user_id}: {decision.reason.value}"
            )
            raise Forbidden("Team not found or insufficient permissions")
        return scope

    async def check_category(self, category_id: uuid.UUID) -> Category:
        category = await get_readable_category(category_id, self.principal.user_id, self.db)
        if category is None:
            raise ValidationFailure("Category not found")
        return category

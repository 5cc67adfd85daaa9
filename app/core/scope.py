# app/core/scope.py
"""
Owning scope of a shared resource.

A Category, Expense, Budget or RecurringExpense belongs to exactly one of:
a single user (personal), a team, or nobody at all (global default
categories). The tagged union below is the only place that reads the
``user_id`` / ``team_id`` / ``is_default`` columns to decide which.
"""
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from .security import Principal


@dataclass(frozen=True)
class PersonalScope:
    user_id: uuid.UUID


@dataclass(frozen=True)
class TeamScope:
    team_id: uuid.UUID


@dataclass(frozen=True)
class DefaultScope:
    pass


Scope = Union[PersonalScope, TeamScope, DefaultScope]


def intended_scope(requested_team_id: Optional[uuid.UUID], principal: Principal) -> Scope:
    """
    Scope a new resource is created into.

    A team scope is only provisional: the caller still has to confirm
    membership and role. It never degrades to personal on failure.
    """
    if requested_team_id is None:
        return PersonalScope(principal.user_id)
    return TeamScope(requested_team_id)


def scope_of(resource: Any) -> Scope:
    if getattr(resource, "is_default", False):
        return DefaultScope()
    if resource.team_id is not None:
        return TeamScope(resource.team_id)
    if resource.user_id is not None:
        return PersonalScope(resource.user_id)
    raise ValueError(f"{resource!r} has no owning scope")


def owner_columns(scope: Scope) -> Dict[str, Optional[uuid.UUID]]:
    """Column values for resources whose owner is either a user or a team, never both."""
    if isinstance(scope, PersonalScope):
        return {"user_id": scope.user_id, "team_id": None}
    if isinstance(scope, TeamScope):
        return {"user_id": None, "team_id": scope.team_id}
    raise ValueError("Default scope cannot own a user-created resource")

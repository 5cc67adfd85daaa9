# app/core/permissions.py
"""
Permission evaluator.

Pure decision functions: given who is acting, the scope of the resource (or
the scope a new resource is headed for), the operation and the acting user's
role in the owning team, return a ``Decision``. A deny is an ordinary return
value carrying a reason; callers decide whether that becomes a 404 or a 403.

Rules for personal resources:
    CREATE / READ / UPDATE / DELETE  -> only the owning user

Rules for team resources (membership required for everything):
    READ             -> any role
    CREATE           -> ADMIN or EDITOR
    UPDATE / DELETE  -> the resource's creator, or ADMIN or EDITOR

Default categories are readable by everyone and writable by no one.
"""
import enum
import uuid
from dataclasses import dataclass
from typing import Optional

from app.models.team import TeamRole
from .scope import DefaultScope, PersonalScope, Scope, TeamScope
from .security import Principal


class Operation(str, enum.Enum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


class MembershipAction(str, enum.Enum):
    INVITE = "invite"
    CHANGE_ROLE = "change_role"
    REMOVE = "remove"


class DenyReason(str, enum.Enum):
    NOT_OWNER = "not_owner"
    NOT_A_MEMBER = "not_a_member"
    INSUFFICIENT_ROLE = "insufficient_role"
    ADMIN_REQUIRED = "admin_required"
    READ_ONLY_DEFAULT = "read_only_default"


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[DenyReason] = None

    def __bool__(self) -> bool:
        return self.allowed

    @property
    def conceals_existence(self) -> bool:
        # The principal has no business knowing the resource exists at all
        return self.reason in (DenyReason.NOT_OWNER, DenyReason.NOT_A_MEMBER)


ALLOW = Decision(allowed=True)

WRITER_ROLES = frozenset({TeamRole.ADMIN, TeamRole.EDITOR})


def deny(reason: DenyReason) -> Decision:
    return Decision(allowed=False, reason=reason)


def _check_role(role: TeamRole) -> None:
    if role not in (TeamRole.ADMIN, TeamRole.EDITOR, TeamRole.VIEWER):
        raise ValueError(f"Unknown team role: {role!r}")


def _team_decision(operation: Operation, role: TeamRole, is_owner: bool) -> Decision:
    _check_role(role)
    if operation is Operation.READ:
        return ALLOW
    if operation is Operation.CREATE:
        return ALLOW if role in WRITER_ROLES else deny(DenyReason.INSUFFICIENT_ROLE)
    if operation in (Operation.UPDATE, Operation.DELETE):
        # Creators keep control of their own entries even after a demotion
        if is_owner or role in WRITER_ROLES:
            return ALLOW
        return deny(DenyReason.INSUFFICIENT_ROLE)
    raise ValueError(f"Unhandled operation: {operation!r}")


def evaluate(
    principal: Principal,
    scope: Scope,
    operation: Operation,
    role: Optional[TeamRole] = None,
    owner_id: Optional[uuid.UUID] = None,
) -> Decision:
    """
    Decide whether ``principal`` may perform ``operation`` on a resource in ``scope``.

    ``role`` is the principal's role in the owning team (None when not a
    member, or when the team no longer exists). ``owner_id`` is the creator
    of an existing team resource, if it has one.
    """
    if isinstance(scope, DefaultScope):
        if operation is Operation.READ:
            return ALLOW
        return deny(DenyReason.READ_ONLY_DEFAULT)

    if isinstance(scope, PersonalScope):
        if scope.user_id == principal.user_id:
            return ALLOW
        return deny(DenyReason.NOT_OWNER)

    if isinstance(scope, TeamScope):
        if role is None:
            return deny(DenyReason.NOT_A_MEMBER)
        is_owner = owner_id is not None and owner_id == principal.user_id
        return _team_decision(operation, role, is_owner)

    raise TypeError(f"Unknown scope: {scope!r}")


def evaluate_team(operation: Operation, role: Optional[TeamRole]) -> Decision:
    """Rules for the team record itself: members read it, only admins change or delete it."""
    if operation is Operation.CREATE:
        return ALLOW
    if role is None:
        return deny(DenyReason.NOT_A_MEMBER)
    _check_role(role)
    if operation is Operation.READ:
        return ALLOW
    if operation in (Operation.UPDATE, Operation.DELETE):
        return ALLOW if role is TeamRole.ADMIN else deny(DenyReason.ADMIN_REQUIRED)
    raise ValueError(f"Unhandled operation: {operation!r}")


def evaluate_membership(
    principal: Principal,
    action: MembershipAction,
    actor_role: Optional[TeamRole],
    target_user_id: Optional[uuid.UUID] = None,
) -> Decision:
    if actor_role is None:
        return deny(DenyReason.NOT_A_MEMBER)
    _check_role(actor_role)
    if action is MembershipAction.REMOVE and target_user_id == principal.user_id:
        return ALLOW
    if action in (MembershipAction.INVITE, MembershipAction.CHANGE_ROLE, MembershipAction.REMOVE):
        return ALLOW if actor_role is TeamRole.ADMIN else deny(DenyReason.ADMIN_REQUIRED)
    raise ValueError(f"Unhandled membership action: {action!r}")

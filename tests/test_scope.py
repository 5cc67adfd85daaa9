import uuid
from types import SimpleNamespace

import pytest

from app.core.scope import (
    DefaultScope,
    PersonalScope,
    TeamScope,
    intended_scope,
    owner_columns,
    scope_of,
)
from app.core.security import Principal

PRINCIPAL = Principal(user_id=uuid.uuid4(), email="alice@example.com")


def test_new_resources_default_to_personal_scope() -> None:
    assert intended_scope(None, PRINCIPAL) == PersonalScope(PRINCIPAL.user_id)


def test_requested_team_is_kept_even_before_membership_is_checked() -> None:
    team_id = uuid.uuid4()
    assert intended_scope(team_id, PRINCIPAL) == TeamScope(team_id)


def test_scope_of_reads_team_before_creator() -> None:
    team_id = uuid.uuid4()
    expense = SimpleNamespace(user_id=PRINCIPAL.user_id, team_id=team_id)
    assert scope_of(expense) == TeamScope(team_id)

    personal = SimpleNamespace(user_id=PRINCIPAL.user_id, team_id=None)
    assert scope_of(personal) == PersonalScope(PRINCIPAL.user_id)


def test_default_categories_have_default_scope() -> None:
    category = SimpleNamespace(user_id=None, team_id=None, is_default=True)
    assert scope_of(category) == DefaultScope()


def test_orphaned_resource_has_no_scope() -> None:
    with pytest.raises(ValueError):
        scope_of(SimpleNamespace(user_id=None, team_id=None, is_default=False))


def test_owner_columns_never_set_both_owners() -> None:
    team_id = uuid.uuid4()
    assert owner_columns(PersonalScope(PRINCIPAL.user_id)) == {"user_id": PRINCIPAL.user_id, "team_id": None}
    assert owner_columns(TeamScope(team_id)) == {"user_id": None, "team_id": team_id}
    with pytest.raises(ValueError):
        owner_columns(DefaultScope())

from datetime import timedelta
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from app.core.errors import Forbidden, NotFound, ValidationFailure
from app.models.expense import Expense
from app.models.team import TeamRole
from app.schemas.expense import ExpenseCreate, ExpenseQuery, ExpenseUpdate
from app.schemas.recurring_expense import RecurringExpenseCreate
from app.services.expenses import ExpenseService, RecurringExpenseService
from app.services.teams import TeamService
from conftest import as_principal, create_team, personal_category, team_category, yesterday


def expense_in(category, amount="25.99", team_id=None, description="Lunch", when=None) -> ExpenseCreate:
    return ExpenseCreate(
        amount=Decimal(amount),
        description=description,
        category_id=category.id,
        date=when or yesterday(),
        team_id=team_id,
    )


async def test_personal_expense_is_invisible_to_other_users(db, alice, bob) -> None:
    groceries = await personal_category(db, alice)
    e1 = await ExpenseService(db, as_principal(alice)).create(expense_in(groceries))

    with pytest.raises(NotFound):
        await ExpenseService(db, as_principal(bob)).get(e1.id)

    own = await ExpenseService(db, as_principal(alice)).get(e1.id)
    assert own.amount == Decimal("25.99")
    assert own.user_id == alice.id and own.team_id is None


async def test_strangers_get_not_found_on_update_and_delete(db, alice, bob) -> None:
    groceries = await personal_category(db, alice)
    e1 = await ExpenseService(db, as_principal(alice)).create(expense_in(groceries))

    with pytest.raises(NotFound):
        await ExpenseService(db, as_principal(bob)).update(e1.id, ExpenseUpdate(amount=Decimal("1")))
    with pytest.raises(NotFound):
        await ExpenseService(db, as_principal(bob)).delete(e1.id)


async def test_viewer_reads_but_cannot_write_team_expense(db, alice, bob) -> None:
    team = await create_team(db, alice, (bob, TeamRole.VIEWER))
    category = await team_category(db, team.id)
    e2 = await ExpenseService(db, as_principal(alice)).create(expense_in(category, team_id=team.id))

    viewer = ExpenseService(db, as_principal(bob))
    with pytest.raises(Forbidden):
        await viewer.update(e2.id, ExpenseUpdate(amount=Decimal("10")))
    with pytest.raises(Forbidden):
        await viewer.delete(e2.id)

    seen = await viewer.get(e2.id)
    assert seen.amount == Decimal("25.99")


async def test_non_members_get_not_found_on_team_expense_writes(db, alice, bob, carol) -> None:
    team = await create_team(db, alice, (bob, TeamRole.EDITOR))
    category = await team_category(db, team.id)
    e2 = await ExpenseService(db, as_principal(alice)).create(expense_in(category, team_id=team.id))

    outsider = ExpenseService(db, as_principal(carol))
    with pytest.raises(NotFound):
        await outsider.update(e2.id, ExpenseUpdate(amount=Decimal("10")))
    with pytest.raises(NotFound):
        await outsider.delete(e2.id)


async def test_role_change_applies_to_the_very_next_request(session_factory, db, alice, bob) -> None:
    team = await create_team(db, alice, (bob, TeamRole.EDITOR))
    category = await team_category(db, team.id)
    expense = await ExpenseService(db, as_principal(alice)).create(expense_in(category, team_id=team.id))

    async with session_factory() as bob_db:
        updated = await ExpenseService(bob_db, as_principal(bob)).update(
            expense.id, ExpenseUpdate(description="Dinner")
        )
        assert updated.description == "Dinner"

        await TeamService(db, as_principal(alice)).change_role(team.id, bob.id, TeamRole.VIEWER)

        with pytest.raises(Forbidden):
            await ExpenseService(bob_db, as_principal(bob)).update(
                expense.id, ExpenseUpdate(description="Breakfast")
            )


async def test_creator_keeps_control_of_own_entry_after_demotion(db, alice, bob) -> None:
    team = await create_team(db, alice, (bob, TeamRole.EDITOR))
    category = await team_category(db, team.id)
    mine = await ExpenseService(db, as_principal(bob)).create(expense_in(category, team_id=team.id))

    await TeamService(db, as_principal(alice)).change_role(team.id, bob.id, TeamRole.VIEWER)

    updated = await ExpenseService(db, as_principal(bob)).update(mine.id, ExpenseUpdate(amount=Decimal("12.50")))
    assert updated.amount == Decimal("12.50")
    await ExpenseService(db, as_principal(bob)).delete(mine.id)


async def test_refused_team_never_falls_back_to_personal(db, alice, bob) -> None:
    team = await create_team(db, alice, (bob, TeamRole.VIEWER))
    category = await team_category(db, team.id)
    own_category = await personal_category(db, bob)

    with pytest.raises(Forbidden):
        await ExpenseService(db, as_principal(bob)).create(expense_in(category, team_id=team.id))

    outsider_team = await create_team(db, alice, name="Household")
    with pytest.raises(Forbidden):
        await ExpenseService(db, as_principal(bob)).create(expense_in(own_category, team_id=outsider_team.id))

    total = (await db.execute(select(func.count()).select_from(Expense))).scalar_one()
    assert total == 0


async def test_category_must_be_readable_by_the_principal(db, alice, bob) -> None:
    alices = await personal_category(db, alice)
    bobs = await personal_category(db, bob)
    expense = await ExpenseService(db, as_principal(bob)).create(expense_in(bobs))

    with pytest.raises(ValidationFailure):
        await ExpenseService(db, as_principal(bob)).create(expense_in(alices))
    with pytest.raises(ValidationFailure):
        await ExpenseService(db, as_principal(bob)).update(expense.id, ExpenseUpdate(category_id=alices.id))


async def test_list_is_own_personal_plus_member_teams(db, alice, bob, carol) -> None:
    team = await create_team(db, alice, (bob, TeamRole.VIEWER))
    shared = await team_category(db, team.id)
    alices = await personal_category(db, alice)
    bobs = await personal_category(db, bob)
    carols = await personal_category(db, carol)

    expenses = ExpenseService(db, as_principal(alice))
    await expenses.create(expense_in(shared, team_id=team.id, description="Hotel"))
    await expenses.create(expense_in(alices, description="Coffee"))
    await ExpenseService(db, as_principal(bob)).create(expense_in(bobs, description="Bob's own"))
    await ExpenseService(db, as_principal(carol)).create(expense_in(carols, description="Carol's own"))

    bob_view = await ExpenseService(db, as_principal(bob)).list(ExpenseQuery())
    assert sorted(e.description for e in bob_view.expenses) == ["Bob's own", "Hotel"]
    assert bob_view.pagination.total == 2

    team_only = await ExpenseService(db, as_principal(bob)).list(ExpenseQuery(team_id=team.id))
    assert [e.description for e in team_only.expenses] == ["Hotel"]


async def test_list_paginates_and_sorts(db, alice) -> None:
    groceries = await personal_category(db, alice)
    expenses = ExpenseService(db, as_principal(alice))
    for i, amount in enumerate(["5.00", "15.00", "10.00"]):
        await expenses.create(expense_in(groceries, amount=amount, when=yesterday() - timedelta(days=i)))

    page = await expenses.list(ExpenseQuery(limit=2, sort_by="amount", sort_order="asc"))
    assert [e.amount for e in page.expenses] == [Decimal("5.00"), Decimal("10.00")]
    assert page.pagination.total == 3
    assert page.pagination.total_pages == 2

    second = await expenses.list(ExpenseQuery(page=2, limit=2, sort_by="amount", sort_order="asc"))
    assert [e.amount for e in second.expenses] == [Decimal("15.00")]


async def test_list_filters_by_date_range(db, alice) -> None:
    groceries = await personal_category(db, alice)
    expenses = ExpenseService(db, as_principal(alice))
    recent = await expenses.create(expense_in(groceries, when=yesterday()))
    await expenses.create(expense_in(groceries, when=yesterday() - timedelta(days=40)))

    window = await expenses.list(ExpenseQuery(start_date=yesterday() - timedelta(days=7)))
    assert [e.id for e in window.expenses] == [recent.id]


async def test_only_the_creator_moves_an_expense_out_of_a_team(db, alice, bob) -> None:
    team = await create_team(db, alice, (bob, TeamRole.EDITOR))
    category = await team_category(db, team.id)
    bobs_entry = await ExpenseService(db, as_principal(bob)).create(expense_in(category, team_id=team.id))

    with pytest.raises(Forbidden):
        await ExpenseService(db, as_principal(alice)).update(bobs_entry.id, ExpenseUpdate(team_id=None))

    moved = await ExpenseService(db, as_principal(bob)).update(bobs_entry.id, ExpenseUpdate(team_id=None))
    assert moved.team_id is None
    assert moved.user_id == bob.id

    with pytest.raises(NotFound):
        await ExpenseService(db, as_principal(alice)).get(bobs_entry.id)


async def test_moving_into_a_team_requires_create_rights_there(db, alice, bob) -> None:
    team = await create_team(db, alice, (bob, TeamRole.VIEWER))
    bobs = await personal_category(db, bob)
    expense = await ExpenseService(db, as_principal(bob)).create(expense_in(bobs))

    with pytest.raises(Forbidden):
        await ExpenseService(db, as_principal(bob)).update(expense.id, ExpenseUpdate(team_id=team.id))

    await TeamService(db, as_principal(alice)).change_role(team.id, bob.id, TeamRole.EDITOR)
    moved = await ExpenseService(db, as_principal(bob)).update(expense.id, ExpenseUpdate(team_id=team.id))
    assert moved.team_id == team.id


async def test_summary_totals_per_category(db, alice) -> None:
    groceries = await personal_category(db, alice)
    fuel = await personal_category(db, alice, name="Fuel")
    expenses = ExpenseService(db, as_principal(alice))
    await expenses.create(expense_in(groceries, amount="10.25"))
    await expenses.create(expense_in(groceries, amount="4.75"))
    await expenses.create(expense_in(fuel, amount="30.00"))

    summary = await expenses.summary()
    assert summary.total == Decimal("45.00")
    assert summary.count == 3
    by_name = {c.category_name: c for c in summary.by_category}
    assert by_name["Groceries"].total == Decimal("15.00")
    assert by_name["Groceries"].count == 2
    assert by_name["Fuel"].total == Decimal("30.00")


async def test_recurring_templates_follow_expense_rules(db, alice, bob) -> None:
    team = await create_team(db, alice, (bob, TeamRole.VIEWER))
    category = await team_category(db, team.id)
    template = RecurringExpenseCreate(
        amount=Decimal("1200.00"),
        description="Rent",
        category_id=category.id,
        next_due_date=yesterday() + timedelta(days=30),
        team_id=team.id,
    )

    with pytest.raises(Forbidden):
        await RecurringExpenseService(db, as_principal(bob)).create(template)

    rent = await RecurringExpenseService(db, as_principal(alice)).create(template)
    assert rent.user_id == alice.id

    visible = await RecurringExpenseService(db, as_principal(bob)).list()
    assert [r.id for r in visible] == [rent.id]
    with pytest.raises(Forbidden):
        await RecurringExpenseService(db, as_principal(bob)).delete(rent.id)

from sqlalchemy import func, select

from app.models.category import Category
from app.services.provisioning import (
    DEFAULT_CATEGORIES,
    OwnerKind,
    ensure_defaults,
    seed_global_defaults,
)
from conftest import create_team


async def count_categories(db, **owner) -> int:
    stmt = select(func.count()).select_from(Category)
    for column, value in owner.items():
        stmt = stmt.where(getattr(Category, column) == value)
    return (await db.execute(stmt)).scalar_one()


async def test_user_defaults_are_seeded_once(db, alice) -> None:
    first = await ensure_defaults(db, OwnerKind.USER, alice.id)
    second = await ensure_defaults(db, OwnerKind.USER, alice.id)

    assert len(first) == len(DEFAULT_CATEGORIES)
    assert second == []
    assert await count_categories(db, user_id=alice.id) == len(DEFAULT_CATEGORIES)


async def test_user_defaults_belong_to_the_user_only(db, alice) -> None:
    created = await ensure_defaults(db, OwnerKind.USER, alice.id)
    assert all(c.user_id == alice.id and c.team_id is None and not c.is_default for c in created)
    assert {c.name for c in created} == {c["name"] for c in DEFAULT_CATEGORIES}


async def test_existing_category_makes_provisioning_a_no_op(db, alice) -> None:
    db.add(Category(user_id=alice.id, name="Rent", color="#111111"))
    await db.commit()

    assert await ensure_defaults(db, OwnerKind.USER, alice.id) == []
    assert await count_categories(db, user_id=alice.id) == 1


async def test_new_team_gets_its_own_defaults(db, alice) -> None:
    team = await create_team(db, alice)

    assert await count_categories(db, team_id=team.id) == len(DEFAULT_CATEGORIES)
    assert await ensure_defaults(db, OwnerKind.TEAM, team.id) == []
    assert await count_categories(db, team_id=team.id) == len(DEFAULT_CATEGORIES)


async def test_global_defaults_are_scope_less_and_idempotent(db) -> None:
    assert await seed_global_defaults(db) == len(DEFAULT_CATEGORIES)
    assert await seed_global_defaults(db) == 0

    result = await db.execute(select(Category).where(Category.is_default.is_(True)))
    defaults = result.scalars().all()
    assert len(defaults) == len(DEFAULT_CATEGORIES)
    assert all(c.user_id is None and c.team_id is None for c in defaults)

import os

# Settings are read at import time; point them at throwaway values first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test_expense_share.db"
os.environ["SECRET_KEY"] = "test-secret-key-for-the-expense-share-suite"

from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from fastapi_users.password import PasswordHelper
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.auth import User
from app.core.database import Base, enable_sqlite_foreign_keys, get_async_session
from app.core.security import Principal
from app.main import app
from app.models import user as _models  # noqa: F401

PASSWORD = "correct horse battery"


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    event.listen(engine.sync_engine, "connect", enable_sqlite_foreign_keys)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


async def create_user(db: AsyncSession, email: str, full_name: str = None) -> User:
    user = User(
        email=email,
        hashed_password=PasswordHelper().hash(PASSWORD),
        full_name=full_name,
        is_active=True,
        is_superuser=False,
        is_verified=True,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


def as_principal(user: User) -> Principal:
    return Principal(user_id=user.id, email=user.email)


def yesterday() -> datetime:
    return datetime.utcnow().replace(microsecond=0) - timedelta(days=1)


def money(value: str) -> Decimal:
    return Decimal(value)


@pytest.fixture
async def alice(db):
    return await create_user(db, "alice@example.com", "Alice Adams")


@pytest.fixture
async def bob(db):
    return await create_user(db, "bob@example.com", "Bob Brown")


@pytest.fixture
async def carol(db):
    return await create_user(db, "carol@example.com", "Carol Chen")


@pytest.fixture
async def client(session_factory):
    async def override_get_async_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_get_async_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac
    app.dependency_overrides.clear()


async def create_team(db: AsyncSession, admin: User, *members, name: str = "Vacation Fund"):
    """Team with ``admin`` as ADMIN plus ``(user, role)`` pairs invited by the admin."""
    from app.schemas.team import MemberInvite
    from app.services.teams import TeamService

    teams = TeamService(db, as_principal(admin))
    team = await teams.create(name)
    for user, role in members:
        await teams.invite(team.id, MemberInvite(email=user.email, role=role))
    return team


async def personal_category(db: AsyncSession, user: User, name: str = "Groceries"):
    from app.schemas.category import CategoryCreate
    from app.services.categories import CategoryService

    return await CategoryService(db, as_principal(user)).create(CategoryCreate(name=name, color="#00aa00"))


async def team_category(db: AsyncSession, team_id):
    from sqlalchemy import select
    from app.models.category import Category

    result = await db.execute(
        select(Category).where(Category.team_id == team_id).order_by(Category.name).limit(1)
    )
    return result.scalar_one()

# app/services/provisioning.py
"""
Default category provisioning.

Runs as part of trusted onboarding (registration, team creation, the seed
script), so no permission checks happen here.
"""
import enum
import logging
import uuid
from typing import List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.scope import PersonalScope, TeamScope, owner_columns
from app.crud.category import count_categories_for_owner, create_category
from app.models.category import Category

logger = logging.getLogger(__name__)


class OwnerKind(str, enum.Enum):
    USER = "user"
    TEAM = "team"


# Seed set every new user and every new team starts with
DEFAULT_CATEGORIES: List[dict] = [
    {"name": "Food & Dining", "color": "#FF5733", "icon": "utensils"},
    {"name": "Transportation", "color": "#33A1FF", "icon": "car"},
    {"name": "Housing", "color": "#33FF57", "icon": "home"},
    {"name": "Entertainment", "color": "#D433FF", "icon": "film"},
    {"name": "Shopping", "color": "#FF33A1", "icon": "shopping-bag"},
    {"name": "Utilities", "color": "#FFD700", "icon": "bolt"},
    {"name": "Healthcare", "color": "#4CAF50", "icon": "heartbeat"},
    {"name": "Travel", "color": "#9C27B0", "icon": "plane"},
    {"name": "Education", "color": "#3F51B5", "icon": "graduation-cap"},
    {"name": "Personal Care", "color": "#E91E63", "icon": "spa"},
    {"name": "Other", "color": "#607D8B", "icon": "ellipsis-h"},
]


async def ensure_defaults(
    db: AsyncSession,
    owner_kind: OwnerKind,
    owner_id: uuid.UUID,
    commit: bool = True,
) -> List[Category]:
    """Give an owner the seed categories unless it already has at least one category.

    Returns the categories created; an empty list means nothing was needed.
    With ``commit=False`` the rows are only flushed so the caller can fold
    them into a larger transaction.
    """
    scope = PersonalScope(owner_id) if owner_kind is OwnerKind.USER else TeamScope(owner_id)
    owner = owner_columns(scope)

    if await count_categories_for_owner(db, **owner):
        logger.debug(f"{owner_kind.value} {owner_id} already has categories, skipping defaults")
        return []

    created = []
    for cat in DEFAULT_CATEGORIES:
        created.append(await create_category({**cat, **owner, "is_default": False}, db, commit=False))
    if commit:
        await db.commit()

    logger.info(f"Seeded {len(created)} default categories for {owner_kind.value} {owner_id}")
    return created


async def seed_global_defaults(db: AsyncSession) -> int:
    """Insert the scope-less, read-only default categories once. Returns how many were added."""
    result = await db.execute(
        select(func.lower(Category.name)).where(Category.is_default.is_(True))
    )
    existing = {name for (name,) in result.all()}

    added = 0
    for cat in DEFAULT_CATEGORIES:
        if cat["name"].lower() in existing:
            continue
        await create_category(
            {**cat, "user_id": None, "team_id": None, "is_default": True}, db, commit=False
        )
        added += 1
    await db.commit()

    logger.info(f"Seeded {added} global default categories")
    return added

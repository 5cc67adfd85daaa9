# app/crud/visibility.py
"""
Query-level form of the Read rule.

"Everything visible to U" is U's personal rows plus every row scoped to a
team U belongs to, whatever the role. Expressed once as a SQL filter so
list endpoints never evaluate permissions row by row.
"""
import uuid

from sqlalchemy import and_, or_, select

from app.models.category import Category
from app.models.team import TeamMember


def member_team_ids(user_id: uuid.UUID):
    return select(TeamMember.team_id).where(TeamMember.user_id == user_id)


def visible_to(model, user_id: uuid.UUID):
    return or_(
        and_(model.team_id.is_(None), model.user_id == user_id),
        model.team_id.in_(member_team_ids(user_id)),
    )


def visible_categories(user_id: uuid.UUID, include_default: bool = True):
    clause = visible_to(Category, user_id)
    if include_default:
        clause = or_(clause, Category.is_default.is_(True))
    return clause

# app/api/deps.py
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_async_session
from app.core.security import Principal, resolve_principal


async def get_current_principal(
    request: Request,
    db: AsyncSession = Depends(get_async_session),
) -> Principal:
    """
    Identity of the caller, from the session cookie or else a bearer token.

    Raises ``Unauthenticated`` (401) when neither proves who is calling.
    """
    return await resolve_principal(request, db)

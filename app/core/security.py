# app/core/security.py
"""
Principal resolution.

A request proves its identity either through the signed session cookie set by
the browser login flow, or through a bearer JWT for programmatic access. Both
proofs end in the same ``Principal`` value; nothing downstream knows or cares
which one was used.
"""
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .auth import User
from .config import settings
from .errors import Unauthenticated

logger = logging.getLogger(__name__)

SESSION_USER_KEY = "user_id"


@dataclass(frozen=True)
class Principal:
    user_id: uuid.UUID
    email: str


def create_access_token(subject: str, email: Optional[str] = None, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token for the given subject (user ID).

    The payload carries the same audience the fastapi-users JWT strategy
    expects, so tokens from either issuer are interchangeable.
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    payload = {
        "sub": subject,
        "aud": [settings.JWT_AUDIENCE],
        "exp": expire,
        "iat": now,
    }
    if email:
        payload["email"] = email
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[uuid.UUID]:
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            audience=settings.JWT_AUDIENCE,
        )
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired bearer token")
        return None
    except jwt.InvalidTokenError as e:
        logger.info(f"Rejected invalid bearer token: {str(e)}")
        return None

    user_id_str = payload.get("sub")
    if not user_id_str:
        return None
    try:
        return uuid.UUID(user_id_str)
    except ValueError:
        return None


def _bearer_token(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:].strip() or None
    return None


def _session_user_id(request: Request) -> Optional[uuid.UUID]:
    # scope["session"] only exists when SessionMiddleware is installed
    session = request.scope.get("session")
    if not session:
        return None
    raw = session.get(SESSION_USER_KEY)
    if not raw:
        return None
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        return None


async def _load_active_user(user_id: uuid.UUID, db: AsyncSession) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None or not user.is_active:
        return None
    return user


async def resolve_principal(request: Request, db: AsyncSession) -> Principal:
    """
    Resolve the acting principal: session first, bearer token second.

    A session naming a deleted or deactivated user counts as no session at
    all, so the token fallback still gets its turn.
    """
    session_user_id = _session_user_id(request)
    if session_user_id is not None:
        user = await _load_active_user(session_user_id, db)
        if user is not None:
            return Principal(user_id=user.id, email=user.email)
        logger.info(f"Ignoring session for unknown or inactive user {session_user_id}")

    token = _bearer_token(request)
    if token:
        token_user_id = decode_access_token(token)
        if token_user_id is not None:
            user = await _load_active_user(token_user_id, db)
            if user is not None:
                return Principal(user_id=user.id, email=user.email)

    raise Unauthenticated()

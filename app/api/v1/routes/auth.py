# app/api/v1/routes/auth.py
import uuid
import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.security import OAuth2PasswordRequestForm
from fastapi_users import BaseUserManager

from app.core.auth import User, get_user_manager
from app.core.config import settings
from app.core.errors import Unauthenticated
from app.core.security import SESSION_USER_KEY, create_access_token
from app.schemas.user import Credentials, Token, TokenUser

logger = logging.getLogger(__name__)

router = APIRouter()

async def _authenticate(email: str, password: str, user_manager: BaseUserManager[User, uuid.UUID]) -> User:
    user = await user_manager.authenticate(OAuth2PasswordRequestForm(username=email, password=password))
    if user is None or not user.is_active:
        logger.info(f"Failed login attempt for {email}")
        raise Unauthenticated("Invalid email or password")
    return user

@router.post("/session/login", response_model=TokenUser)
async def session_login(
    request: Request,
    credentials: OAuth2PasswordRequestForm = Depends(),
    user_manager: BaseUserManager[User, uuid.UUID] = Depends(get_user_manager),
):
    """
    Browser login. Verifies email (sent as `username`) and password and
    stores the user in the signed session cookie.
    """
    user = await _authenticate(credentials.username, credentials.password, user_manager)
    request.session[SESSION_USER_KEY] = str(user.id)
    logger.info(f"User {user.email} logged in with a session")
    return user

@router.post("/session/logout", status_code=status.HTTP_200_OK)
async def session_logout(request: Request):
    """Clear the session cookie. Works whether or not anyone is logged in."""
    request.session.clear()
    return {"detail": "Successfully logged out"}

@router.post("/token", response_model=Token)
async def issue_token(
    credentials: Credentials,
    user_manager: BaseUserManager[User, uuid.UUID] = Depends(get_user_manager),
):
    """
    Exchange email and password for a bearer token, for API clients and
    testing tools. The token grants exactly what a session would.
    """
    user = await _authenticate(credentials.email, credentials.password, user_manager)
    return Token(
        user=TokenUser.model_validate(user),
        access_token=create_access_token(str(user.id), email=user.email),
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )

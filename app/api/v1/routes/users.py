# app/api/v1/routes/users.py
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import UserRead
from app.core.database import get_async_session
from app.core.errors import Unauthenticated
from app.core.security import Principal
from app.crud.user import get_user_by_id, update_user_fields
from app.schemas.user import ProfileUpdate
from app.services.users import delete_account
from app.api.deps import get_current_principal

router = APIRouter()

async def _current_user(principal: Principal, db: AsyncSession):
    user = await get_user_by_id(principal.user_id, db)
    if user is None:
        raise Unauthenticated()
    return user

# 1) GET /users/me
@router.get("/me", response_model=UserRead)
async def read_own_profile(
    db: AsyncSession = Depends(get_async_session),
    principal: Principal = Depends(get_current_principal),
):
    """Get current user's profile"""
    return await _current_user(principal, db)

# 2) PATCH /users/me
@router.patch("/me", response_model=UserRead)
async def update_own_profile(
    profile_in: ProfileUpdate,
    db: AsyncSession = Depends(get_async_session),
    principal: Principal = Depends(get_current_principal),
):
    """Update current user's profile"""
    user = await _current_user(principal, db)
    if "full_name" not in profile_in.model_fields_set:
        return user
    return await update_user_fields(user, profile_in.full_name, db)

# 3) DELETE /users/me
@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_own_account(
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    principal: Principal = Depends(get_current_principal),
):
    """
    Delete the current account with its personal data. Team expenses the
    user added stay with their teams. Refused with 409 while the user is
    the only admin of a team.
    """
    await delete_account(principal, db)
    request.session.clear()
    return None

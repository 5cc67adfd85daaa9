# app/api/v1/routes/categories.py
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import uuid

from app.schemas.category import CategoryCreate, CategoryRead, CategoryUpdate
from app.services.categories import CategoryService
from app.core.database import get_async_session
from app.core.security import Principal
from app.api.deps import get_current_principal

router = APIRouter()

@router.get("", response_model=List[CategoryRead])
async def read_categories(
    team_id: Optional[uuid.UUID] = Query(None, description="Only categories of this team"),
    include_default: bool = Query(True, description="Include the global default categories"),
    db: AsyncSession = Depends(get_async_session),
    principal: Principal = Depends(get_current_principal),
):
    """Categories visible to the caller: their own, their teams', and the defaults."""
    return await CategoryService(db, principal).list(team_id=team_id, include_default=include_default)

@router.post("", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
async def create_category(
    cat_in: CategoryCreate,
    db: AsyncSession = Depends(get_async_session),
    principal: Principal = Depends(get_current_principal),
):
    return await CategoryService(db, principal).create(cat_in)

@router.get("/{category_id}", response_model=CategoryRead)
async def read_category(
    category_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    principal: Principal = Depends(get_current_principal),
):
    return await CategoryService(db, principal).get(category_id)

@router.patch("/{category_id}", response_model=CategoryRead)
async def update_category_endpoint(
    category_id: uuid.UUID,
    cat_in: CategoryUpdate,
    db: AsyncSession = Depends(get_async_session),
    principal: Principal = Depends(get_current_principal),
):
    return await CategoryService(db, principal).update(category_id, cat_in)

@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category_endpoint(
    category_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    principal: Principal = Depends(get_current_principal),
):
    """Delete a category. Fails with 409 while anything still references it."""
    await CategoryService(db, principal).delete(category_id)
    return None

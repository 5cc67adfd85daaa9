# app/schemas/category.py
from typing import Annotated, Optional
from datetime import datetime
from pydantic import BaseModel, StringConstraints
import uuid

CategoryName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]
HexColor = Annotated[str, StringConstraints(pattern=r"^#[0-9A-Fa-f]{6}$", to_upper=True)]
IconName = Annotated[str, StringConstraints(max_length=50, pattern=r"^[a-z0-9-]+$")]


class CategoryBase(BaseModel):
    name: CategoryName
    color: HexColor
    icon: Optional[IconName] = None


class CategoryCreate(CategoryBase):
    team_id: Optional[uuid.UUID] = None
    # Accepted so the request can be refused explicitly; only provisioning creates defaults
    is_default: bool = False


class CategoryUpdate(BaseModel):
    name: Optional[CategoryName] = None
    color: Optional[HexColor] = None
    icon: Optional[IconName] = None
    is_default: Optional[bool] = None


class CategoryRead(BaseModel):
    id: uuid.UUID
    name: str
    color: str
    icon: Optional[str] = None
    is_default: bool = False
    user_id: Optional[uuid.UUID] = None
    team_id: Optional[uuid.UUID] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

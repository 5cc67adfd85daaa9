# app/schemas/user.py
from typing import Optional
from pydantic import BaseModel, EmailStr, Field
import uuid

# Fields accepted on PATCH /users/me
class ProfileUpdate(BaseModel):
    full_name: Optional[str] = Field(None, max_length=100)

class TokenUser(BaseModel):
    id: uuid.UUID
    email: EmailStr
    full_name: Optional[str] = None

    class Config:
        from_attributes = True

class Token(BaseModel):
    user: TokenUser
    access_token: str
    token_type: str = "bearer"
    expires_in: int

# Body of POST /auth/token
class Credentials(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

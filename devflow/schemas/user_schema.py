from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional

from devflow.enums import UserRole
from devflow.schemas.common_schema import reject_null

class UserCreate(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=8)
    name: str = Field(..., min_length=1, max_length=100)
    role: UserRole = UserRole.DEVELOPER
    avatar_url: Optional[str] = None

class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = None
    password: Optional[str] = Field(None, min_length=8)
    role: Optional[UserRole] = None
    avatar_url: Optional[str] = None

    @field_validator("name", "email", "password", "role")
    @classmethod
    def required_not_null(cls, value):
        return reject_null(value)

class UserResponse(BaseModel):
    id: int
    email: str
    name: str
    role: str
    avatar_url: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True

class AuthPayload(BaseModel):
    user: UserResponse
    token: str
    refreshToken: str

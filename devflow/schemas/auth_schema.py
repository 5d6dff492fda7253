from pydantic import BaseModel, Field
from typing import Optional

class LoginRequest(BaseModel):
    email: str
    password: str

class SignupRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=8)
    name: str = Field(..., min_length=1, max_length=100)
    # Accepted for compatibility, public signup always creates a developer
    role: Optional[str] = None
    avatar_url: Optional[str] = None

class RefreshRequest(BaseModel):
    refreshToken: str

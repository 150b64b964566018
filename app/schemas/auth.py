"""
Authentication-related schemas
"""
from pydantic import EmailStr, Field
from typing import Optional
from app.schemas.base import CamelModel
from app.schemas.profile import ProfileResponse


class LoginRequest(CamelModel):
    email: EmailStr
    password: str


class LoginResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: ProfileResponse


class SignupRequest(CamelModel):
    """Staff self-registration into an existing organization"""
    full_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str
    confirm_password: str
    organization_slug: str = Field(..., min_length=1)
    avatar_url: Optional[str] = None

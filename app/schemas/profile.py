"""
Profile-related schemas
"""
from typing import Optional
from app.schemas.base import CamelModel, UUIDSchema, TimestampSchema, UserRole


class ProfileSummary(CamelModel):
    id: str
    email: str
    full_name: str


class ProfileResponse(UUIDSchema, TimestampSchema):
    email: str
    full_name: str
    role: UserRole
    organization_id: Optional[str] = None
    avatar_url: Optional[str] = None
    is_active: bool


class ProfileRoleUpdate(CamelModel):
    role: UserRole

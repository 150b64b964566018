"""
Notification recipient schemas
"""
from pydantic import EmailStr, Field
from typing import Optional
from app.schemas.base import CamelModel, UUIDSchema, TimestampSchema


class RecipientCreate(CamelModel):
    email: EmailStr
    name: Optional[str] = Field(None, max_length=255)


class RecipientUpdate(CamelModel):
    is_active: bool


class RecipientResponse(UUIDSchema, TimestampSchema):
    email: str
    name: Optional[str] = None
    is_active: bool
    organization_id: str
    added_by: Optional[str] = None

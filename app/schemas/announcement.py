"""
Announcement schemas
"""
from pydantic import Field
from typing import Optional
from app.schemas.base import CamelModel, UUIDSchema, TimestampSchema


class AnnouncementCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    pinned: bool = False
    image_url: Optional[str] = Field(None, max_length=500)


class AnnouncementUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = Field(None, min_length=1)
    pinned: Optional[bool] = None
    image_url: Optional[str] = Field(None, max_length=500)


class AnnouncementResponse(UUIDSchema, TimestampSchema):
    title: str
    content: str
    pinned: bool
    image_url: Optional[str] = None
    organization_id: str

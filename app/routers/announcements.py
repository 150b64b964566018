"""
Announcement API routes
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from app.database import get_async_session
from app.schemas import (
    AnnouncementCreate, AnnouncementUpdate, AnnouncementResponse, MessageResponse
)
from app.services.announcement_service import AnnouncementService
from app.dependencies import get_current_member, get_current_admin
from app.models import Profile

router = APIRouter(prefix="/announcements", tags=["Announcements"])


@router.get("", response_model=List[AnnouncementResponse])
async def list_announcements(
    current_user: Profile = Depends(get_current_member),
    db: AsyncSession = Depends(get_async_session)
):
    """Announcements for the caller's organization, pinned first"""
    announcement_service = AnnouncementService(db)
    return await announcement_service.list_announcements(current_user)


@router.post("", response_model=AnnouncementResponse, status_code=status.HTTP_201_CREATED)
async def create_announcement(
    announcement_data: AnnouncementCreate,
    current_user: Profile = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_session)
):
    announcement_service = AnnouncementService(db)
    return await announcement_service.create_announcement(current_user, announcement_data)


@router.patch("/{announcement_id}", response_model=AnnouncementResponse)
async def update_announcement(
    announcement_id: str,
    announcement_data: AnnouncementUpdate,
    current_user: Profile = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_session)
):
    announcement_service = AnnouncementService(db)
    return await announcement_service.update_announcement(
        current_user, announcement_id, announcement_data
    )


@router.delete("/{announcement_id}", response_model=MessageResponse)
async def delete_announcement(
    announcement_id: str,
    current_user: Profile = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_session)
):
    announcement_service = AnnouncementService(db)
    await announcement_service.delete_announcement(current_user, announcement_id)
    return MessageResponse(message="Announcement deleted")

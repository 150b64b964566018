"""
Announcement service layer
"""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_
from typing import List
from fastapi import HTTPException, status
import logging

from app.models import Announcement, Profile
from app.schemas import AnnouncementCreate, AnnouncementUpdate

logger = logging.getLogger(__name__)


class AnnouncementService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_announcements(self, member: Profile) -> List[Announcement]:
        """Pinned first, then newest first"""
        stmt = (
            select(Announcement)
            .where(Announcement.organization_id == member.organization_id)
            .order_by(Announcement.pinned.desc(), Announcement.created_at.desc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def create_announcement(self, admin: Profile, data: AnnouncementCreate) -> Announcement:
        announcement = Announcement(
            title=data.title,
            content=data.content,
            pinned=data.pinned,
            image_url=data.image_url,
            organization_id=admin.organization_id
        )
        self.db.add(announcement)
        await self.db.commit()
        await self.db.refresh(announcement)
        logger.info(f"Announcement {announcement.id} created in organization {admin.organization_id}")
        return announcement

    async def _get_announcement(self, admin: Profile, announcement_id: str) -> Announcement:
        stmt = select(Announcement).where(and_(
            Announcement.id == announcement_id,
            Announcement.organization_id == admin.organization_id
        ))
        result = await self.db.execute(stmt)
        announcement = result.scalar_one_or_none()
        if not announcement:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Announcement not found"
            )
        return announcement

    async def update_announcement(
        self, admin: Profile, announcement_id: str, data: AnnouncementUpdate
    ) -> Announcement:
        announcement = await self._get_announcement(admin, announcement_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(announcement, field, value)

        await self.db.commit()
        await self.db.refresh(announcement)
        return announcement

    async def delete_announcement(self, admin: Profile, announcement_id: str) -> None:
        announcement = await self._get_announcement(admin, announcement_id)
        await self.db.delete(announcement)
        await self.db.commit()
        logger.info(f"Announcement {announcement_id} deleted")

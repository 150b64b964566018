"""
Notification recipient service layer
"""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select, and_
from typing import List
from fastapi import HTTPException, status
import logging

from app.models import NotificationRecipient, Profile
from app.schemas import RecipientCreate

logger = logging.getLogger(__name__)


class RecipientService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_recipients(self, admin: Profile) -> List[NotificationRecipient]:
        stmt = (
            select(NotificationRecipient)
            .where(NotificationRecipient.organization_id == admin.organization_id)
            .order_by(NotificationRecipient.created_at)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def add_recipient(self, admin: Profile, data: RecipientCreate) -> NotificationRecipient:
        email = data.email.strip().lower()
        org_id = admin.organization_id

        stmt = select(NotificationRecipient).where(and_(
            NotificationRecipient.organization_id == org_id,
            NotificationRecipient.email == email
        ))
        result = await self.db.execute(stmt)
        if result.scalar_one_or_none():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="This email is already a notification recipient"
            )

        recipient = NotificationRecipient(
            email=email,
            name=data.name.strip() if data.name else None,
            is_active=True,
            added_by=admin.id,
            organization_id=org_id
        )
        self.db.add(recipient)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="This email is already a notification recipient"
            )
        await self.db.refresh(recipient)

        logger.info(f"Notification recipient {email} added to organization {org_id}")
        return recipient

    async def _get_recipient(self, admin: Profile, recipient_id: str) -> NotificationRecipient:
        # Scoped by organization: another tenant's recipient is simply not found
        stmt = select(NotificationRecipient).where(and_(
            NotificationRecipient.id == recipient_id,
            NotificationRecipient.organization_id == admin.organization_id
        ))
        result = await self.db.execute(stmt)
        recipient = result.scalar_one_or_none()
        if not recipient:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Recipient not found"
            )
        return recipient

    async def set_active(self, admin: Profile, recipient_id: str, is_active: bool) -> NotificationRecipient:
        recipient = await self._get_recipient(admin, recipient_id)
        recipient.is_active = is_active
        await self.db.commit()
        await self.db.refresh(recipient)
        logger.info(f"Notification recipient {recipient.email} {'enabled' if is_active else 'disabled'}")
        return recipient

    async def delete_recipient(self, admin: Profile, recipient_id: str) -> None:
        recipient = await self._get_recipient(admin, recipient_id)
        await self.db.delete(recipient)
        await self.db.commit()
        logger.info(f"Notification recipient {recipient_id} removed from organization {admin.organization_id}")

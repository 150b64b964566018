"""
Notification recipient API routes
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from app.database import get_async_session
from app.schemas import RecipientCreate, RecipientUpdate, RecipientResponse, MessageResponse
from app.services.recipient_service import RecipientService
from app.dependencies import get_current_admin
from app.models import Profile
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/recipients", tags=["Notification Recipients"])


@router.get("", response_model=List[RecipientResponse])
async def list_recipients(
    current_user: Profile = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_session)
):
    """List the addresses that receive admin notifications"""
    recipient_service = RecipientService(db)
    return await recipient_service.list_recipients(current_user)


@router.post("", response_model=RecipientResponse, status_code=status.HTTP_201_CREATED)
async def add_recipient(
    recipient_data: RecipientCreate,
    current_user: Profile = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_session)
):
    recipient_service = RecipientService(db)

    try:
        return await recipient_service.add_recipient(current_user, recipient_data)
    except Exception as e:
        logger.error(f"Adding notification recipient {recipient_data.email} failed: {e}")
        raise


@router.patch("/{recipient_id}", response_model=RecipientResponse)
async def update_recipient(
    recipient_id: str,
    recipient_data: RecipientUpdate,
    current_user: Profile = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_session)
):
    """Enable or disable a recipient"""
    recipient_service = RecipientService(db)
    return await recipient_service.set_active(current_user, recipient_id, recipient_data.is_active)


@router.delete("/{recipient_id}", response_model=MessageResponse)
async def delete_recipient(
    recipient_id: str,
    current_user: Profile = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_session)
):
    recipient_service = RecipientService(db)
    await recipient_service.delete_recipient(current_user, recipient_id)
    return MessageResponse(message="Recipient removed")

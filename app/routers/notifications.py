"""
Notification fan-out API routes
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from app.database import get_async_session
from app.schemas import NotificationEvent, NotificationResult
from app.schemas.base import NotificationType
from app.services.leave_request_service import LeaveRequestService
from app.services.notification_service import NotificationService
from app.dependencies import get_optional_user, get_notification_service
from app.models import Profile
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.post("/send", response_model=NotificationResult)
async def send_notification(
    event: NotificationEvent,
    current_user: Optional[Profile] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_async_session),
    notifier: NotificationService = Depends(get_notification_service)
):
    """
    Dispatch one event to the spreadsheet log and email.

    Submission events are routed to the signed-in profile's organization.
    Anonymous submissions never target a tenant: they go to the fallback
    sheet and the configured fallback recipients. Decision events re-send
    the email for a request that already carries that decision and need an
    admin of its organization.
    """
    if NotificationType(event.type).is_decision:
        if current_user is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Unauthorized",
                headers={"WWW-Authenticate": "Bearer"},
            )
        leave_service = LeaveRequestService(db)
        return await leave_service.resend_decision(
            request_id=event.request_id,
            admin=current_user,
            decision=NotificationType(event.type),
            notifier=notifier,
            admin_notes=event.admin_notes,
        )

    organization_id = None
    if current_user is not None and current_user.organization_id:
        organization_id = current_user.organization_id
    elif event.organization_id:
        logger.warning(f"Ignoring organization {event.organization_id} in {event.type} from a caller without an organization")

    try:
        return await notifier.notify_submission(event, organization_id)
    except Exception as e:
        logger.error(f"Notification dispatch failed for {event.type}: {e}")
        raise

"""
Notification fan-out.

A submission event is logged to the organization's spreadsheet and mailed to
the organization's notification recipients; a decision event is logged to the
notifications table and mailed to the requester. Each side effect has its own
error boundary, so a Sheets outage never blocks email and vice versa.
"""
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from jinja2 import TemplateError
from typing import List, Optional
import logging

from app.config import Settings
from app.models import LeaveRequest, Notification, NotificationRecipient, Organization, Profile
from app.schemas.base import NotificationType
from app.schemas.notification import NotificationResult
from app.services.email_service import EmailService, EmailDeliveryError
from app.services.sheets_service import SheetsService
from app.utils.helpers import local_timestamp
from app.utils.sheet_rows import build_sheet_row

logger = logging.getLogger(__name__)

SUBJECTS = {
    NotificationType.NEW_REQUEST: "New Time-Off Request from {name}",
    NotificationType.VACATION_REQUEST: "New Vacation Request from {name}",
    NotificationType.TIME_CLOCK_REQUEST: "Time Clock Request from {name}",
    NotificationType.OVERTIME_REQUEST: "Overtime Submission from {name}",
    NotificationType.SICK_DAY_REQUEST: "Sick Day Submission from {name}",
    NotificationType.APPROVED: "Time-Off Request Approved - {leave_type}",
    NotificationType.DENIED: "Time-Off Request Denied - {leave_type}",
}


class NotificationService:
    def __init__(self, db: AsyncSession, email: EmailService, sheets: SheetsService, config: Settings):
        self.db = db
        self.email = email
        self.sheets = sheets
        self.config = config

    async def notify_submission(self, event, organization_id: Optional[str]) -> NotificationResult:
        """
        Fan out a submission event: sheet row first, then the admin email.

        The sheet append is attempted regardless of mail configuration and its
        failure never prevents the email.
        """
        event_type = NotificationType(event.type)
        await self._log_to_sheet(event, organization_id)

        recipients = await self.resolve_recipients(organization_id)
        if not self.email.configured:
            logger.info(f"Gmail credentials not configured, skipping {event_type.value} email")
            return NotificationResult(email_sent=False)
        if not recipients:
            logger.info(f"No notification recipients for organization {organization_id}, skipping admin email")
            return NotificationResult(email_sent=False)

        context = event.model_dump()
        context.update({
            "organization_id": organization_id,
            "admin_url": f"{self.config.app_url}/admin",
        })
        subject = SUBJECTS[event_type].format(name=event.employee_name)
        message_id = await self._send(f"{event_type.value}.html", context, recipients, subject)
        if message_id is None:
            return NotificationResult(email_sent=False)

        logger.info(f"Admin notification sent for {event_type.value} (request {event.request_id})")
        return NotificationResult(email_sent=True, message_id=message_id)

    async def notify_decision(
        self,
        request: LeaveRequest,
        requester: Profile,
        leave_type: str,
        decision: NotificationType,
        admin_notes: Optional[str] = None,
    ) -> NotificationResult:
        """
        Log and email an approval or denial to the requester.

        Called after the decision is committed; nothing here can undo it.
        """
        # Rollbacks expire ORM state, so read everything up front
        request_id = request.id
        to = [requester.email]
        context = {
            "user_name": requester.full_name,
            "leave_type": leave_type,
            "start_date": request.start_date,
            "end_date": request.end_date,
            "admin_notes": admin_notes,
            "dashboard_url": f"{self.config.app_url}/dashboard",
        }
        notification = await self._record_notification(request_id, request.user_id, decision)

        if not self.email.configured:
            logger.info(f"Gmail credentials not configured, skipping {decision.value} email for request {request_id}")
            return NotificationResult(email_sent=False)

        subject = SUBJECTS[decision].format(leave_type=leave_type)
        message_id = await self._send(f"{decision.value}.html", context, to, subject)
        if message_id is None:
            return NotificationResult(email_sent=False)

        if notification is not None:
            try:
                notification.email_sent = True
                await self.db.commit()
            except SQLAlchemyError as e:
                await self.db.rollback()
                logger.error(f"Failed to mark {decision.value} notification for request {request_id} as sent: {e}")

        return NotificationResult(email_sent=True, message_id=message_id)

    async def resolve_recipients(self, organization_id: Optional[str]) -> List[str]:
        """
        Active recipient addresses for an organization.

        Falls back to the configured address list only when the lookup fails;
        an organization that disabled every recipient gets no email.
        """
        if organization_id is None:
            return self.config.fallback_recipients

        try:
            stmt = select(NotificationRecipient.email).where(
                NotificationRecipient.organization_id == organization_id,
                NotificationRecipient.is_active.is_(True)
            )
            result = await self.db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Error fetching notification recipients for organization {organization_id}: {e}")
            return self.config.fallback_recipients

    async def _log_to_sheet(self, event, organization_id: Optional[str]) -> bool:
        sheet_id = None
        if organization_id:
            try:
                stmt = select(Organization.google_sheet_id).where(Organization.id == organization_id)
                result = await self.db.execute(stmt)
                sheet_id = result.scalar_one_or_none()
            except SQLAlchemyError as e:
                # Leave the session usable for the recipient lookup
                await self.db.rollback()
                logger.error(f"Error fetching sheet id for organization {organization_id}: {e}")
                return False

        try:
            tab, values = build_sheet_row(event, local_timestamp(self.config.timezone))
            return await self.sheets.append_row(values, tab, sheet_id)
        except Exception as e:
            # Any failure here is contained; the email step still runs
            logger.error(
                f"Failed to log {event.type} to Google Sheets for organization {organization_id}: {e}",
                exc_info=True
            )
            return False

    async def _record_notification(
        self, request_id: str, user_id: str, decision: NotificationType
    ) -> Optional[Notification]:
        try:
            notification = Notification(
                user_id=user_id,
                request_id=request_id,
                type=decision.value,
                email_sent=False,
            )
            self.db.add(notification)
            await self.db.commit()
            return notification
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to log {decision.value} notification for request {request_id}: {e}")
            return None

    async def _send(self, template_name: str, context: dict, to: List[str], subject: str) -> Optional[str]:
        try:
            html = self.email.render(template_name, context)
            return await self.email.send_mail(to, subject, html)
        except (EmailDeliveryError, TemplateError) as e:
            logger.error(f"Failed to send '{subject}' to {to}: {e}")
            return None

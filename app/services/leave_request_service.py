"""
Leave request service layer: submissions, decisions and request views
"""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, and_
from sqlalchemy.orm import selectinload
from datetime import date, datetime, timezone
from typing import List, Optional
from fastapi import HTTPException, status
import logging

from app.config import settings
from app.models import LeaveType, PayPeriod, LeaveRequest, LeaveRequestDate, Profile
from app.schemas import (
    DayOffSubmission, VacationSubmission, NewRequestEvent, VacationRequestEvent,
    SubmissionResponse, DecisionResponse, CalendarEntry
)
from app.schemas.base import NotificationType, RequestStatus
from app.services.notification_service import NotificationService
from app.utils.access import ensure_org_admin
from app.utils.helpers import weekday_dates, local_today

logger = logging.getLogger(__name__)

VACATION_LEAVE_TYPE = "Vacation"


class LeaveRequestService:

    def __init__(self, db: AsyncSession):
        self.db = db

    # Reference data

    async def list_leave_types(self) -> List[LeaveType]:
        result = await self.db.execute(select(LeaveType).order_by(LeaveType.name))
        return list(result.scalars().all())

    async def list_pay_periods(self, t4_year: Optional[int] = None) -> List[PayPeriod]:
        stmt = select(PayPeriod).order_by(PayPeriod.t4_year, PayPeriod.period_number)
        if t4_year is not None:
            stmt = stmt.where(PayPeriod.t4_year == t4_year)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def _get_leave_type(self, leave_type_id: str) -> Optional[LeaveType]:
        result = await self.db.execute(select(LeaveType).where(LeaveType.id == leave_type_id))
        return result.scalar_one_or_none()

    async def _get_leave_type_by_name(self, name: str) -> Optional[LeaveType]:
        result = await self.db.execute(select(LeaveType).where(LeaveType.name == name))
        return result.scalar_one_or_none()

    async def _existing_pay_period_id(self, pay_period_id: Optional[str]) -> Optional[str]:
        if not pay_period_id:
            return None
        result = await self.db.execute(select(PayPeriod.id).where(PayPeriod.id == pay_period_id))
        return result.scalar_one_or_none()

    # Submissions

    async def submit_day_off(
        self,
        user: Profile,
        data: DayOffSubmission,
        notifier: NotificationService
    ) -> SubmissionResponse:
        """Persist a single day off (when its leave type exists) and notify admins"""
        submission_date = data.submission_date or local_today(settings.timezone)
        leave_type = await self._get_leave_type(data.leave_type_id)

        request_id = None
        if leave_type:
            request_id = await self._create_request(
                user=user,
                leave_type_id=leave_type.id,
                pay_period_id=await self._existing_pay_period_id(data.pay_period_id),
                submission_date=submission_date,
                start_date=data.day_off_date,
                end_date=data.day_off_date,
                reason=data.reason,
                coverage_name=data.coverage_name,
                coverage_email=data.coverage_email,
                dates=[data.day_off_date],
            )
        else:
            logger.warning(f"Leave type {data.leave_type_id} not found; day off by {user.id} not persisted")

        event = NewRequestEvent(
            organization_id=user.organization_id,
            request_id=request_id,
            employee_name=data.employee_name,
            employee_email=data.employee_email,
            submission_date=submission_date,
            pay_period_label=data.pay_period_label,
            leave_type=leave_type.name if leave_type else "Time Off",
            start_date=data.day_off_date,
            end_date=data.day_off_date,
            reason=data.reason,
            total_days=1,
            coverage_name=data.coverage_name,
            coverage_email=data.coverage_email,
        )
        result = await notifier.notify_submission(event, user.organization_id)
        return SubmissionResponse(request_id=request_id, email_sent=result.email_sent)

    async def submit_vacation(
        self,
        user: Profile,
        data: VacationSubmission,
        notifier: NotificationService
    ) -> SubmissionResponse:
        """Persist a vacation against the Vacation leave type, one date row per weekday"""
        weekdays = weekday_dates(data.start_date, data.end_date)
        if not weekdays:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Selected dates do not include any weekdays"
            )

        submission_date = data.submission_date or local_today(settings.timezone)
        pay_period_label = ", ".join(label.strip() for label in data.pay_period_labels if label.strip())
        leave_type = await self._get_leave_type_by_name(VACATION_LEAVE_TYPE)

        request_id = None
        if leave_type:
            request_id = await self._create_request(
                user=user,
                leave_type_id=leave_type.id,
                pay_period_id=await self._existing_pay_period_id(data.pay_period_id),
                submission_date=submission_date,
                start_date=data.start_date,
                end_date=data.end_date,
                reason=data.notes or VACATION_LEAVE_TYPE,
                coverage_name=data.coverage_name,
                coverage_email=data.coverage_email,
                dates=weekdays,
            )

        event = VacationRequestEvent(
            organization_id=user.organization_id,
            request_id=request_id,
            employee_name=data.employee_name,
            employee_email=data.employee_email,
            submission_date=submission_date,
            pay_period_label=pay_period_label,
            start_date=data.start_date,
            end_date=data.end_date,
            total_days=len(weekdays),
            coverage_name=data.coverage_name,
            coverage_email=data.coverage_email,
            notes=data.notes,
        )
        result = await notifier.notify_submission(event, user.organization_id)
        return SubmissionResponse(request_id=request_id, email_sent=result.email_sent)

    async def submit_event(self, user: Profile, event, notifier: NotificationService) -> SubmissionResponse:
        """Time clock, overtime and sick day submissions are notification-only"""
        event = event.model_copy(update={
            "organization_id": user.organization_id,
            "submission_date": event.submission_date or local_today(settings.timezone),
        })
        result = await notifier.notify_submission(event, user.organization_id)
        return SubmissionResponse(request_id=None, email_sent=result.email_sent)

    async def _create_request(self, user: Profile, dates: List[date], **fields) -> str:
        leave_request = LeaveRequest(
            user_id=user.id,
            organization_id=user.organization_id,
            status=RequestStatus.PENDING.value,
            **fields
        )
        self.db.add(leave_request)
        await self.db.flush()
        for day in dates:
            self.db.add(LeaveRequestDate(request_id=leave_request.id, date=day))
        await self.db.commit()

        logger.info(f"Leave request {leave_request.id} submitted by {user.id}")
        return leave_request.id

    # Decisions

    async def get_request(self, request_id: str, reload: bool = False) -> LeaveRequest:
        stmt = self._with_details(select(LeaveRequest).where(LeaveRequest.id == request_id))
        if reload:
            stmt = stmt.execution_options(populate_existing=True)
        result = await self.db.execute(stmt)
        leave_request = result.scalar_one_or_none()
        if not leave_request:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Request not found"
            )
        return leave_request

    async def decide(
        self,
        request_id: str,
        admin: Profile,
        decision: RequestStatus,
        notifier: NotificationService,
        admin_notes: Optional[str] = None
    ) -> DecisionResponse:
        """
        Move a pending request to approved or denied, then notify the requester.

        The status write is conditional on the row still being pending, so two
        concurrent decisions cannot both succeed.
        """
        leave_request = await self.get_request(request_id)
        ensure_org_admin(admin, leave_request.organization_id)

        values = {
            "status": decision.value,
            "reviewed_by": admin.id,
            "reviewed_at": datetime.now(timezone.utc),
        }
        if decision == RequestStatus.DENIED:
            values["admin_notes"] = admin_notes

        stmt = (
            update(LeaveRequest)
            .where(and_(
                LeaveRequest.id == request_id,
                LeaveRequest.status == RequestStatus.PENDING.value
            ))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        if result.rowcount != 1:
            await self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Request has already been processed"
            )
        await self.db.commit()
        leave_request = await self.get_request(request_id, reload=True)
        logger.info(f"Request {request_id} {decision.value} by {admin.id}")

        notification_type = NotificationType(decision.value)
        try:
            notification = await notifier.notify_decision(
                request=leave_request,
                requester=leave_request.user,
                leave_type=leave_request.leave_type.name,
                decision=notification_type,
                admin_notes=admin_notes,
            )
            email_sent = notification.email_sent
        except Exception as e:
            # The decision is already committed; report and move on
            logger.error(f"Decision notification for request {request_id} failed: {e}", exc_info=True)
            email_sent = False

        return DecisionResponse(request_id=request_id, status=decision, email_sent=email_sent)

    async def resend_decision(
        self,
        request_id: str,
        admin: Profile,
        decision: NotificationType,
        notifier: NotificationService,
        admin_notes: Optional[str] = None
    ):
        """Re-send the decision email for a request that already carries that decision"""
        leave_request = await self.get_request(request_id)
        ensure_org_admin(admin, leave_request.organization_id)

        if leave_request.status != decision.value:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Request is {leave_request.status}, not {decision.value}"
            )

        return await notifier.notify_decision(
            request=leave_request,
            requester=leave_request.user,
            leave_type=leave_request.leave_type.name,
            decision=decision,
            admin_notes=admin_notes if admin_notes is not None else leave_request.admin_notes,
        )

    # Views

    def _with_details(self, stmt):
        return stmt.options(selectinload(LeaveRequest.user), selectinload(LeaveRequest.leave_type))

    async def list_mine(self, user: Profile) -> List[LeaveRequest]:
        stmt = self._with_details(
            select(LeaveRequest)
            .where(LeaveRequest.user_id == user.id)
            .order_by(LeaveRequest.created_at.desc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_pending(self, admin: Profile) -> List[LeaveRequest]:
        stmt = self._with_details(
            select(LeaveRequest)
            .where(and_(
                LeaveRequest.organization_id == admin.organization_id,
                LeaveRequest.status == RequestStatus.PENDING.value
            ))
            .order_by(LeaveRequest.created_at.asc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_history(self, admin: Profile) -> List[LeaveRequest]:
        stmt = self._with_details(
            select(LeaveRequest)
            .where(and_(
                LeaveRequest.organization_id == admin.organization_id,
                LeaveRequest.status != RequestStatus.PENDING.value
            ))
            .order_by(LeaveRequest.reviewed_at.desc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def calendar(self, member: Profile, start: date, end: date) -> List[CalendarEntry]:
        """Approved leave dates in the caller's organization"""
        if end < start:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="End date must be on or after the start date"
            )

        stmt = (
            select(LeaveRequestDate.date, LeaveRequest.id, Profile.full_name, LeaveType.name, LeaveType.color)
            .join(LeaveRequest, LeaveRequestDate.request_id == LeaveRequest.id)
            .join(Profile, LeaveRequest.user_id == Profile.id)
            .join(LeaveType, LeaveRequest.leave_type_id == LeaveType.id)
            .where(and_(
                LeaveRequest.organization_id == member.organization_id,
                LeaveRequest.status == RequestStatus.APPROVED.value,
                LeaveRequestDate.date >= start,
                LeaveRequestDate.date <= end
            ))
            .order_by(LeaveRequestDate.date, Profile.full_name)
        )
        result = await self.db.execute(stmt)
        return [
            CalendarEntry(
                leave_date=row[0],
                request_id=row[1],
                employee_name=row[2],
                leave_type=row[3],
                color=row[4],
            )
            for row in result.all()
        ]

    async def withdraw(self, request_id: str, user: Profile) -> None:
        """Requester deletes their own request while it is still pending"""
        leave_request = await self.get_request(request_id)

        if leave_request.user_id != user.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You can only withdraw your own requests"
            )
        if leave_request.status != RequestStatus.PENDING.value:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Only pending requests can be withdrawn"
            )

        await self.db.execute(delete(LeaveRequestDate).where(LeaveRequestDate.request_id == request_id))
        await self.db.execute(
            delete(LeaveRequest).where(and_(
                LeaveRequest.id == request_id,
                LeaveRequest.status == RequestStatus.PENDING.value
            ))
        )
        await self.db.commit()
        logger.info(f"Request {request_id} withdrawn by {user.id}")

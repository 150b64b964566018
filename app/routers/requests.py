"""
Leave request API routes: submissions, decisions and request views
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from datetime import date
from app.database import get_async_session
from app.schemas import (
    DayOffSubmission, VacationSubmission, TimeClockRequestEvent, OvertimeRequestEvent,
    SickDayRequestEvent, SubmissionResponse, DenyRequest, DecisionResponse,
    LeaveRequestResponse, CalendarEntry, MessageResponse
)
from app.schemas.base import RequestStatus
from app.services.leave_request_service import LeaveRequestService
from app.services.notification_service import NotificationService
from app.dependencies import get_current_member, get_current_admin, get_notification_service
from app.models import Profile
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/requests", tags=["Requests"])


@router.post("/day-off", response_model=SubmissionResponse)
async def submit_day_off(
    submission: DayOffSubmission,
    current_user: Profile = Depends(get_current_member),
    db: AsyncSession = Depends(get_async_session),
    notifier: NotificationService = Depends(get_notification_service)
):
    """Submit a single day off"""
    leave_service = LeaveRequestService(db)

    try:
        return await leave_service.submit_day_off(current_user, submission, notifier)
    except Exception as e:
        logger.error(f"Day off submission failed for {current_user.id}: {e}")
        raise


@router.post("/vacation", response_model=SubmissionResponse)
async def submit_vacation(
    submission: VacationSubmission,
    current_user: Profile = Depends(get_current_member),
    db: AsyncSession = Depends(get_async_session),
    notifier: NotificationService = Depends(get_notification_service)
):
    """Submit a vacation covering a date range"""
    leave_service = LeaveRequestService(db)

    try:
        return await leave_service.submit_vacation(current_user, submission, notifier)
    except Exception as e:
        logger.error(f"Vacation submission failed for {current_user.id}: {e}")
        raise


@router.post("/time-clock", response_model=SubmissionResponse)
async def submit_time_clock(
    submission: TimeClockRequestEvent,
    current_user: Profile = Depends(get_current_member),
    db: AsyncSession = Depends(get_async_session),
    notifier: NotificationService = Depends(get_notification_service)
):
    """Report a missed clock-in or clock-out"""
    leave_service = LeaveRequestService(db)
    return await leave_service.submit_event(current_user, submission, notifier)


@router.post("/overtime", response_model=SubmissionResponse)
async def submit_overtime(
    submission: OvertimeRequestEvent,
    current_user: Profile = Depends(get_current_member),
    db: AsyncSession = Depends(get_async_session),
    notifier: NotificationService = Depends(get_notification_service)
):
    """Report overtime worked"""
    leave_service = LeaveRequestService(db)
    return await leave_service.submit_event(current_user, submission, notifier)


@router.post("/sick-day", response_model=SubmissionResponse)
async def submit_sick_day(
    submission: SickDayRequestEvent,
    current_user: Profile = Depends(get_current_member),
    db: AsyncSession = Depends(get_async_session),
    notifier: NotificationService = Depends(get_notification_service)
):
    """Report a sick day"""
    leave_service = LeaveRequestService(db)
    return await leave_service.submit_event(current_user, submission, notifier)


@router.get("/mine", response_model=List[LeaveRequestResponse])
async def list_my_requests(
    current_user: Profile = Depends(get_current_member),
    db: AsyncSession = Depends(get_async_session)
):
    """Requests submitted by the current profile, newest first"""
    leave_service = LeaveRequestService(db)
    return await leave_service.list_mine(current_user)


@router.get("/pending", response_model=List[LeaveRequestResponse])
async def list_pending_requests(
    current_user: Profile = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_session)
):
    leave_service = LeaveRequestService(db)
    return await leave_service.list_pending(current_user)


@router.get("/history", response_model=List[LeaveRequestResponse])
async def list_request_history(
    current_user: Profile = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_session)
):
    leave_service = LeaveRequestService(db)
    return await leave_service.list_history(current_user)


@router.get("/calendar", response_model=List[CalendarEntry])
async def team_calendar(
    start: date = Query(..., description="First day to include"),
    end: date = Query(..., description="Last day to include"),
    current_user: Profile = Depends(get_current_member),
    db: AsyncSession = Depends(get_async_session)
):
    """Approved leave days in the caller's organization"""
    leave_service = LeaveRequestService(db)
    return await leave_service.calendar(current_user, start, end)


@router.post("/{request_id}/approve", response_model=DecisionResponse)
async def approve_request(
    request_id: str,
    current_user: Profile = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_session),
    notifier: NotificationService = Depends(get_notification_service)
):
    """Approve a pending request"""
    leave_service = LeaveRequestService(db)

    try:
        return await leave_service.decide(request_id, current_user, RequestStatus.APPROVED, notifier)
    except Exception as e:
        logger.error(f"Approval of request {request_id} failed: {e}")
        raise


@router.post("/{request_id}/deny", response_model=DecisionResponse)
async def deny_request(
    request_id: str,
    deny_data: Optional[DenyRequest] = None,
    current_user: Profile = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_session),
    notifier: NotificationService = Depends(get_notification_service)
):
    """Deny a pending request with an optional note to the requester"""
    leave_service = LeaveRequestService(db)

    try:
        return await leave_service.decide(
            request_id, current_user, RequestStatus.DENIED, notifier,
            deny_data.admin_notes if deny_data else None
        )
    except Exception as e:
        logger.error(f"Denial of request {request_id} failed: {e}")
        raise


@router.delete("/{request_id}", response_model=MessageResponse, status_code=status.HTTP_200_OK)
async def withdraw_request(
    request_id: str,
    current_user: Profile = Depends(get_current_member),
    db: AsyncSession = Depends(get_async_session)
):
    """Withdraw one of your own pending requests"""
    leave_service = LeaveRequestService(db)
    await leave_service.withdraw(request_id, current_user)
    return MessageResponse(message="Request withdrawn")

"""
Reference data API routes (leave types and pay periods)
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from app.database import get_async_session
from app.schemas import LeaveTypeResponse, PayPeriodResponse
from app.services.leave_request_service import LeaveRequestService

router = APIRouter(tags=["Reference Data"])


@router.get("/leave-types", response_model=List[LeaveTypeResponse])
async def list_leave_types(db: AsyncSession = Depends(get_async_session)):
    leave_service = LeaveRequestService(db)
    return await leave_service.list_leave_types()


@router.get("/pay-periods", response_model=List[PayPeriodResponse])
async def list_pay_periods(
    year: Optional[int] = Query(None, description="T4 year to filter by"),
    db: AsyncSession = Depends(get_async_session)
):
    leave_service = LeaveRequestService(db)
    return await leave_service.list_pay_periods(year)

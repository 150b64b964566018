"""
Leave request, reference data and submission schemas
"""
from pydantic import EmailStr, Field, model_validator
from typing import Optional, List
from datetime import date, datetime
from app.schemas.base import CamelModel, UUIDSchema, TimestampSchema, RequestStatus
from app.schemas.profile import ProfileSummary


class LeaveTypeResponse(UUIDSchema):
    name: str
    color: str
    is_single_day: bool


class PayPeriodResponse(UUIDSchema):
    period_number: int
    start_date: date
    end_date: date
    t4_year: int


class DayOffSubmission(CamelModel):
    employee_name: str = Field(..., min_length=1)
    employee_email: EmailStr
    leave_type_id: str = Field(..., min_length=1)
    day_off_date: date
    reason: str = Field(..., min_length=1)
    pay_period_label: str = Field(..., min_length=1)
    pay_period_id: Optional[str] = None
    submission_date: Optional[date] = None
    coverage_name: Optional[str] = None
    coverage_email: Optional[EmailStr] = None


class VacationSubmission(CamelModel):
    employee_name: str = Field(..., min_length=1)
    employee_email: EmailStr
    start_date: date
    end_date: date
    pay_period_labels: List[str] = Field(..., min_length=1)
    pay_period_id: Optional[str] = None
    submission_date: Optional[date] = None
    coverage_name: Optional[str] = None
    coverage_email: Optional[EmailStr] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_range(self):
        if self.end_date < self.start_date:
            raise ValueError("End date must be on or after the start date")
        return self


class SubmissionResponse(CamelModel):
    success: bool = True
    request_id: Optional[str] = None
    email_sent: bool = False


class DenyRequest(CamelModel):
    admin_notes: Optional[str] = None


class DecisionResponse(CamelModel):
    success: bool = True
    request_id: str
    status: RequestStatus
    email_sent: bool = False


class LeaveRequestResponse(UUIDSchema, TimestampSchema):
    user_id: str
    organization_id: str
    leave_type_id: str
    pay_period_id: Optional[str] = None
    submission_date: date
    start_date: date
    end_date: date
    reason: str
    coverage_name: Optional[str] = None
    coverage_email: Optional[str] = None
    status: RequestStatus
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    admin_notes: Optional[str] = None
    leave_type: Optional[LeaveTypeResponse] = None
    user: Optional[ProfileSummary] = None


class CalendarEntry(CamelModel):
    leave_date: date
    request_id: str
    employee_name: str
    leave_type: str
    color: str

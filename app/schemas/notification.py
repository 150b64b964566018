"""
Notification event schemas

Every event sent through the notification fan-out is one of these models,
discriminated by its ``type`` field.
"""
from pydantic import EmailStr, Field, model_validator
from typing import Optional, Literal, Union, Annotated
from datetime import date
from app.schemas.base import CamelModel


class EventBase(CamelModel):
    organization_id: Optional[str] = None
    request_id: Optional[str] = None


class SubmissionEventBase(EventBase):
    employee_name: str = Field(..., min_length=1)
    employee_email: EmailStr
    submission_date: Optional[date] = None
    pay_period_label: Optional[str] = None


class NewRequestEvent(SubmissionEventBase):
    type: Literal["new_request"] = "new_request"
    leave_type: str = "Time Off"
    start_date: date
    end_date: date
    reason: str = ""
    total_days: int = 1
    coverage_name: Optional[str] = None
    coverage_email: Optional[str] = None


class VacationRequestEvent(SubmissionEventBase):
    type: Literal["vacation_request"] = "vacation_request"
    start_date: date
    end_date: date
    total_days: int = 0
    coverage_name: Optional[str] = None
    coverage_email: Optional[str] = None
    notes: Optional[str] = None


class TimeClockRequestEvent(SubmissionEventBase):
    type: Literal["time_clock_request"] = "time_clock_request"
    clock_in_date: Optional[date] = None
    clock_in_time: Optional[str] = None
    clock_in_reason: Optional[str] = None
    clock_out_date: Optional[date] = None
    clock_out_time: Optional[str] = None
    clock_out_reason: Optional[str] = None

    @property
    def has_clock_in(self) -> bool:
        return bool(self.clock_in_date and self.clock_in_time and self.clock_in_reason)

    @property
    def has_clock_out(self) -> bool:
        return bool(self.clock_out_date and self.clock_out_time and self.clock_out_reason)

    @model_validator(mode="after")
    def require_one_entry(self):
        if not (self.has_clock_in or self.has_clock_out):
            raise ValueError("Provide a complete clock-in or clock-out entry (date, time and reason)")
        return self


class OvertimeRequestEvent(SubmissionEventBase):
    type: Literal["overtime_request"] = "overtime_request"
    overtime_date: date
    asked_doctor: Optional[bool] = None
    senior_staff_name: Optional[str] = None

    @model_validator(mode="after")
    def check_approval_source(self):
        if not self.pay_period_label:
            raise ValueError("Pay period is required")
        if self.asked_doctor is None:
            raise ValueError("Please answer whether you asked the doctor")
        if not self.asked_doctor and not (self.senior_staff_name or "").strip():
            raise ValueError("Senior staff name is required when the doctor was not asked")
        return self


class SickDayRequestEvent(SubmissionEventBase):
    type: Literal["sick_day_request"] = "sick_day_request"
    sick_date: date
    has_doctor_note: bool = False
    doctor_note_link: Optional[str] = None


class DecisionEvent(EventBase):
    """Approval or denial sent to the requester"""
    type: Literal["approved", "denied"]
    request_id: str
    admin_notes: Optional[str] = None


SubmissionEvent = Annotated[
    Union[
        NewRequestEvent,
        VacationRequestEvent,
        TimeClockRequestEvent,
        OvertimeRequestEvent,
        SickDayRequestEvent,
    ],
    Field(discriminator="type"),
]

NotificationEvent = Annotated[
    Union[
        NewRequestEvent,
        VacationRequestEvent,
        TimeClockRequestEvent,
        OvertimeRequestEvent,
        SickDayRequestEvent,
        DecisionEvent,
    ],
    Field(discriminator="type"),
]


class NotificationResult(CamelModel):
    success: bool = True
    email_sent: bool = False
    message_id: Optional[str] = None

"""
Google Sheets tab layout for submission logging.

Tab names must match what organizations already have in their spreadsheets,
so they are user-visible constants and must not be renamed.
"""
from typing import Dict, List, Tuple
from app.schemas.notification import (
    NewRequestEvent, VacationRequestEvent, TimeClockRequestEvent,
    OvertimeRequestEvent, SickDayRequestEvent
)
from app.utils.helpers import LocalTimestamp, or_na, yes_no


DAY_OFF_TAB = "Day Off Requests"
VACATION_TAB = "Vacation Requests"
TIME_CLOCK_TAB = "Time Clock Adjustments"
OVERTIME_TAB = "Overtime Requests"
SICK_DAY_TAB = "Sick Days"

TAB_HEADERS: Dict[str, List[str]] = {
    DAY_OFF_TAB: [
        "Submission Date", "Time", "Day", "Request Type", "Employee Name", "Employee Email",
        "Leave Type", "Start Date", "End Date", "Total Days", "Reason", "Pay Period",
        "Coverage Name", "Coverage Email",
    ],
    VACATION_TAB: [
        "Submission Date", "Time", "Day", "Request Type", "Employee Name", "Employee Email",
        "Start Date", "End Date", "Weekdays", "Pay Period", "Coverage Name", "Coverage Email",
        "Notes",
    ],
    TIME_CLOCK_TAB: [
        "Submission Date", "Time", "Day", "Request Type", "Employee Name", "Employee Email",
        "Clock In", "Clock Out", "Clock In Reason", "Clock Out Reason", "Pay Period",
    ],
    OVERTIME_TAB: [
        "Submission Date", "Time", "Day", "Request Type", "Employee Name", "Employee Email",
        "Overtime Date", "Asked Doctor", "Senior Staff", "Pay Period",
    ],
    SICK_DAY_TAB: [
        "Submission Date", "Time", "Day", "Employee Name", "Employee Email", "Pay Period",
        "Sick Date", "Doctor Note", "Doctor Note Link",
    ],
}

COLUMN_COUNTS: Dict[str, int] = {tab: len(headers) for tab, headers in TAB_HEADERS.items()}


def _stamp(event, ts: LocalTimestamp) -> List[str]:
    submitted = event.submission_date.isoformat() if event.submission_date else ts.date
    return [submitted, ts.time, ts.day_of_week]


def _clock_entry(entry_date, entry_time) -> str:
    if not entry_date or not entry_time:
        return "N/A"
    return f"{entry_date.isoformat()} {entry_time}"


def day_off_row(event: NewRequestEvent, ts: LocalTimestamp) -> List[str]:
    return _stamp(event, ts) + [
        "Leave Request",
        event.employee_name,
        event.employee_email,
        event.leave_type,
        event.start_date.isoformat(),
        event.end_date.isoformat(),
        str(event.total_days),
        event.reason,
        or_na(event.pay_period_label),
        or_na(event.coverage_name),
        or_na(event.coverage_email),
    ]


def vacation_row(event: VacationRequestEvent, ts: LocalTimestamp) -> List[str]:
    return _stamp(event, ts) + [
        "Vacation Request",
        event.employee_name,
        event.employee_email,
        event.start_date.isoformat(),
        event.end_date.isoformat(),
        str(event.total_days),
        or_na(event.pay_period_label),
        or_na(event.coverage_name),
        or_na(event.coverage_email),
        or_na(event.notes),
    ]


def time_clock_row(event: TimeClockRequestEvent, ts: LocalTimestamp) -> List[str]:
    return _stamp(event, ts) + [
        "Time Clock Request",
        event.employee_name,
        event.employee_email,
        _clock_entry(event.clock_in_date, event.clock_in_time),
        _clock_entry(event.clock_out_date, event.clock_out_time),
        or_na(event.clock_in_reason),
        or_na(event.clock_out_reason),
        or_na(event.pay_period_label),
    ]


def overtime_row(event: OvertimeRequestEvent, ts: LocalTimestamp) -> List[str]:
    return _stamp(event, ts) + [
        "Overtime Request",
        event.employee_name,
        event.employee_email,
        event.overtime_date.isoformat(),
        yes_no(event.asked_doctor),
        or_na(event.senior_staff_name),
        or_na(event.pay_period_label),
    ]


def sick_day_row(event: SickDayRequestEvent, ts: LocalTimestamp) -> List[str]:
    return _stamp(event, ts) + [
        event.employee_name,
        event.employee_email,
        or_na(event.pay_period_label),
        event.sick_date.isoformat(),
        yes_no(event.has_doctor_note),
        or_na(event.doctor_note_link),
    ]


_ROW_BUILDERS = {
    "new_request": (DAY_OFF_TAB, day_off_row),
    "vacation_request": (VACATION_TAB, vacation_row),
    "time_clock_request": (TIME_CLOCK_TAB, time_clock_row),
    "overtime_request": (OVERTIME_TAB, overtime_row),
    "sick_day_request": (SICK_DAY_TAB, sick_day_row),
}


def build_sheet_row(event, ts: LocalTimestamp) -> Tuple[str, List[str]]:
    """
    Build the tab name and row values logged for a submission event.

    Raises:
        ValueError: for event types that are not logged to the sheet
    """
    try:
        tab, builder = _ROW_BUILDERS[event.type]
    except KeyError:
        raise ValueError(f"No sheet tab for event type {event.type!r}")
    return tab, builder(event, ts)

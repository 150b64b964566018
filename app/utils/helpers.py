"""
Helper utilities for StaffHub.
Provides slug generation, recipient list parsing and date formatting helpers.
"""
import re
from datetime import date, datetime, timedelta
from typing import Any, List, NamedTuple, Optional
from zoneinfo import ZoneInfo

SLUG_MAX_LENGTH = 50

_SLUG_INVALID_CHARS = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE_RUN = re.compile(r"\s+")
_HYPHEN_RUN = re.compile(r"-+")


def generate_slug(name: str) -> str:
    """
    Generate a URL slug from an organization name.

    Args:
        name: Display name, e.g. "Dr. Smith's Clinic!"

    Returns:
        Lowercase slug of at most 50 characters, e.g. "dr-smiths-clinic"
    """
    slug = name.lower()
    slug = _SLUG_INVALID_CHARS.sub("", slug)
    slug = _WHITESPACE_RUN.sub("-", slug)
    slug = _HYPHEN_RUN.sub("-", slug)
    return slug[:SLUG_MAX_LENGTH]


def parse_email_list(raw: Optional[str]) -> List[str]:
    """Split a comma separated address list, dropping blank entries."""
    if not raw:
        return []
    return [email.strip() for email in raw.split(",") if email.strip()]


class LocalTimestamp(NamedTuple):
    date: str
    time: str
    day_of_week: str


def local_timestamp(tz_name: str, now: Optional[datetime] = None) -> LocalTimestamp:
    """
    Current date, 12-hour time and weekday name in the given timezone.

    Args:
        tz_name: IANA timezone name, e.g. "America/Los_Angeles"
        now: Aware datetime to convert (defaults to the current time)

    Returns:
        LocalTimestamp("2025-03-04", "09:05:00 AM", "Tuesday")
    """
    tz = ZoneInfo(tz_name)
    local = now.astimezone(tz) if now else datetime.now(tz)
    return LocalTimestamp(
        date=local.strftime("%Y-%m-%d"),
        time=local.strftime("%I:%M:%S %p"),
        day_of_week=local.strftime("%A"),
    )


def weekday_dates(start: date, end: date) -> List[date]:
    """All Monday-Friday dates in the inclusive range."""
    days = []
    current = start
    while current <= end:
        if current.weekday() < 5:
            days.append(current)
        current += timedelta(days=1)
    return days


def yes_no(value: Optional[bool]) -> str:
    return "Yes" if value else "No"


def or_na(value: Any) -> str:
    """Render a missing optional value as "N/A"."""
    if value is None or value == "":
        return "N/A"
    return str(value)


def long_date(value: Optional[date]) -> str:
    """Format a date as "Tuesday, March 4, 2025"."""
    if not value:
        return ""
    return f"{value:%A}, {value:%B} {value.day}, {value.year}"


def format_date_range(start: Optional[date], end: Optional[date]) -> str:
    """Single long date for same-day requests, otherwise "start - end"."""
    if not end or start == end:
        return long_date(start)
    return f"{long_date(start)} - {long_date(end)}"


def local_today(tz_name: str) -> date:
    """Today's date in the given timezone."""
    return datetime.now(ZoneInfo(tz_name)).date()

"""
Utils package initialization for StaffHub.
"""
from .helpers import (
    generate_slug,
    parse_email_list,
    local_timestamp,
    weekday_dates,
    format_date_range,
)
from .access import can_access_organization, can_access_admin_route

__all__ = [
    "generate_slug",
    "parse_email_list",
    "local_timestamp",
    "weekday_dates",
    "format_date_range",
    "can_access_organization",
    "can_access_admin_route",
]

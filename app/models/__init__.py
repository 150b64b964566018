"""
Models package - imports all database models
"""
from app.database import Base
from app.models.base import CreatedAtMixin, TimestampMixin, UUIDMixin
from app.models.organization import Organization
from app.models.profile import Profile
from app.models.leave import LeaveType, PayPeriod, LeaveRequest, LeaveRequestDate, Notification
from app.models.notification_recipient import NotificationRecipient
from app.models.announcement import Announcement

# Export all models for easy import
__all__ = [
    "Base",
    "CreatedAtMixin",
    "TimestampMixin",
    "UUIDMixin",
    "Organization",
    "Profile",
    "LeaveType",
    "PayPeriod",
    "LeaveRequest",
    "LeaveRequestDate",
    "Notification",
    "NotificationRecipient",
    "Announcement",
]

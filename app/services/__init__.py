"""
Services package initialization for StaffHub.
Imports all service classes for business logic operations.
"""

from .auth_service import AuthService
from .email_service import EmailService, EmailDeliveryError
from .sheets_service import SheetsService, SheetAccessError
from .notification_service import NotificationService
from .organization_service import OrganizationService
from .leave_request_service import LeaveRequestService
from .recipient_service import RecipientService
from .announcement_service import AnnouncementService
from .employee_service import EmployeeService

__all__ = [
    "AuthService",
    "EmailService",
    "EmailDeliveryError",
    "SheetsService",
    "SheetAccessError",
    "NotificationService",
    "OrganizationService",
    "LeaveRequestService",
    "RecipientService",
    "AnnouncementService",
    "EmployeeService",
]

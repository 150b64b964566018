"""
Schemas package - imports all Pydantic schemas
"""
from app.schemas.base import (
    UserRole, RequestStatus, NotificationType, CamelModel,
    TimestampSchema, UUIDSchema, MessageResponse, TokenPayload
)
from app.schemas.profile import ProfileSummary, ProfileResponse, ProfileRoleUpdate
from app.schemas.auth import LoginRequest, LoginResponse, SignupRequest
from app.schemas.organization import (
    RegisterOrganizationRequest, RegisterOrganizationResponse, OrganizationSummary,
    OrganizationResponse, OrganizationUpdate, SheetRequest, CreateSheetRequest,
    LinkSheetResponse, TestSheetResponse, CreateSheetResponse
)
from app.schemas.notification import (
    NewRequestEvent, VacationRequestEvent, TimeClockRequestEvent,
    OvertimeRequestEvent, SickDayRequestEvent, DecisionEvent,
    SubmissionEvent, NotificationEvent, NotificationResult
)
from app.schemas.leave import (
    LeaveTypeResponse, PayPeriodResponse, DayOffSubmission, VacationSubmission,
    SubmissionResponse, DenyRequest, DecisionResponse, LeaveRequestResponse,
    CalendarEntry
)
from app.schemas.recipient import RecipientCreate, RecipientUpdate, RecipientResponse
from app.schemas.announcement import AnnouncementCreate, AnnouncementUpdate, AnnouncementResponse

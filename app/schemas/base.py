"""
Base schemas and common types
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from datetime import datetime
from enum import Enum


class UserRole(str, Enum):
    STAFF = "staff"
    ADMIN = "admin"


class RequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"


class NotificationType(str, Enum):
    NEW_REQUEST = "new_request"
    VACATION_REQUEST = "vacation_request"
    TIME_CLOCK_REQUEST = "time_clock_request"
    OVERTIME_REQUEST = "overtime_request"
    SICK_DAY_REQUEST = "sick_day_request"
    APPROVED = "approved"
    DENIED = "denied"

    @property
    def is_decision(self) -> bool:
        return self in (NotificationType.APPROVED, NotificationType.DENIED)


class CamelModel(BaseModel):
    """Base model whose JSON field names are camelCase"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class TimestampSchema(CamelModel):
    created_at: datetime
    updated_at: datetime


class UUIDSchema(CamelModel):
    id: str


class MessageResponse(BaseModel):
    message: str
    status: str = "success"


class TokenPayload(BaseModel):
    """JWT token payload"""
    sub: str  # profile ID
    email: str
    org_id: str | None = None
    role: str = UserRole.STAFF.value
    exp: int
    iat: int

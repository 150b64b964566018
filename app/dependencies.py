"""
Authentication and collaborator dependencies for FastAPI
"""
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional
from app.config import settings
from app.database import get_async_session
from app.models import Profile
from app.security import verify_token
from app.services.email_service import EmailService
from app.services.sheets_service import SheetsService
from app.services.notification_service import NotificationService
import logging

logger = logging.getLogger(__name__)

# HTTP Bearer token scheme
security = HTTPBearer(auto_error=False)


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def _load_profile(token: str, db: AsyncSession) -> Optional[Profile]:
    token_payload = verify_token(token)
    if not token_payload:
        return None

    stmt = select(Profile).where(Profile.id == token_payload.sub)
    result = await db.execute(stmt)
    profile = result.scalar_one_or_none()

    if not profile or not profile.is_active:
        return None
    return profile


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_async_session)
) -> Profile:
    """Get current authenticated profile"""
    if not credentials:
        raise _unauthorized()

    profile = await _load_profile(credentials.credentials, db)
    if not profile:
        raise _unauthorized()

    return profile


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_async_session)
) -> Optional[Profile]:
    """Get current profile if authenticated, None otherwise"""
    if not credentials:
        return None
    return await _load_profile(credentials.credentials, db)


async def get_current_member(
    current_user: Profile = Depends(get_current_user)
) -> Profile:
    """Get current profile if it belongs to an organization"""
    if not current_user.organization_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Organization membership required"
        )
    return current_user


async def get_current_admin(
    current_user: Profile = Depends(get_current_member)
) -> Profile:
    """Get current profile if it is an organization admin"""
    if current_user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden - Admin access required"
        )
    return current_user


def get_email_service() -> EmailService:
    """Mail transport built from settings; unconfigured when credentials are absent"""
    return EmailService(settings)


def get_sheets_service() -> SheetsService:
    """Sheets/Drive client built from settings"""
    return SheetsService(settings)


def get_notification_service(
    db: AsyncSession = Depends(get_async_session),
    email: EmailService = Depends(get_email_service),
    sheets: SheetsService = Depends(get_sheets_service),
) -> NotificationService:
    return NotificationService(db, email, sheets, settings)

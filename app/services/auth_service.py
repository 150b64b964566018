"""
Authentication service layer: identities, sign-in and staff sign-up
"""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select
from typing import Optional
from fastapi import HTTPException, status
import logging

from app.config import settings
from app.models import Organization, Profile
from app.schemas import LoginResponse, ProfileResponse, SignupRequest
from app.schemas.base import UserRole
from app.security import hash_password, verify_password, create_access_token, create_token_data

logger = logging.getLogger(__name__)


class AuthService:

    def __init__(self, db: AsyncSession):
        self.db = db

    def validate_password(self, password: str) -> None:
        if len(password) < settings.min_password_length:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Password must be at least {settings.min_password_length} characters"
            )

    async def get_profile_by_email(self, email: str) -> Optional[Profile]:
        stmt = select(Profile).where(Profile.email == email.strip().lower())
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def create_identity(
        self,
        email: str,
        password: str,
        full_name: str,
        role: UserRole = UserRole.STAFF,
        organization_id: Optional[str] = None
    ) -> Profile:
        """
        Create a sign-in identity and its profile.

        The profile row is the identity: its id is the subject of issued tokens.
        """
        email = email.strip().lower()
        self.validate_password(password)

        if await self.get_profile_by_email(email):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="A user with this email address has already been registered"
            )

        profile = Profile(
            email=email,
            full_name=full_name.strip(),
            role=role.value,
            password_hash=hash_password(password),
            organization_id=organization_id,
            is_active=True
        )
        self.db.add(profile)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="A user with this email address has already been registered"
            )
        await self.db.refresh(profile)

        logger.info(f"Identity created for {email} ({role.value})")
        return profile

    async def authenticate(self, email: str, password: str) -> Profile:
        """Check credentials and return the profile"""
        profile = await self.get_profile_by_email(email)

        if not profile or not verify_password(password, profile.password_hash):
            logger.warning(f"Failed sign-in attempt for {email}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password"
            )

        if not profile.is_active:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="User account is inactive"
            )

        return profile

    async def login(self, email: str, password: str) -> LoginResponse:
        profile = await self.authenticate(email, password)
        token = create_access_token(
            create_token_data(profile.id, profile.email, profile.organization_id, profile.role)
        )
        logger.info(f"User signed in: {profile.email}")
        return LoginResponse(
            access_token=token,
            expires_in=settings.access_token_expire_minutes * 60,
            user=ProfileResponse.model_validate(profile)
        )

    async def signup(self, data: SignupRequest) -> Profile:
        """Self-register a staff member into an existing organization"""
        if data.password != data.confirm_password:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Passwords do not match"
            )
        self.validate_password(data.password)

        stmt = select(Organization).where(Organization.slug == data.organization_slug)
        result = await self.db.execute(stmt)
        organization = result.scalar_one_or_none()
        if not organization:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Organization not found"
            )

        profile = await self.create_identity(
            email=data.email,
            password=data.password,
            full_name=data.full_name,
            role=UserRole.STAFF,
            organization_id=organization.id
        )
        if data.avatar_url:
            profile.avatar_url = data.avatar_url
            await self.db.commit()
        return profile

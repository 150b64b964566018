"""
Authentication API routes
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import get_async_session
from app.schemas import LoginRequest, LoginResponse, SignupRequest, ProfileResponse
from app.services.auth_service import AuthService
from app.dependencies import get_current_user
from app.models import Profile
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=LoginResponse)
async def login(
    login_data: LoginRequest,
    db: AsyncSession = Depends(get_async_session)
):
    """Authenticate a profile and return an access token"""
    auth_service = AuthService(db)

    try:
        return await auth_service.login(login_data.email, login_data.password)
    except Exception as e:
        logger.error(f"Login failed for {login_data.email}: {e}")
        raise


@router.post("/signup", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    signup_data: SignupRequest,
    db: AsyncSession = Depends(get_async_session)
):
    """Register a staff member into an existing organization"""
    auth_service = AuthService(db)

    try:
        profile = await auth_service.signup(signup_data)
        logger.info(f"Staff member signed up: {profile.email}")
        return profile
    except Exception as e:
        logger.error(f"Sign-up failed for {signup_data.email}: {e}")
        raise


@router.get("/me", response_model=ProfileResponse)
async def get_current_user_info(current_user: Profile = Depends(get_current_user)):
    """Get current profile information"""
    return current_user

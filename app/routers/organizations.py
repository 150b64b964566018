"""
Organization registration and lookup API routes
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import get_async_session
from app.schemas import (
    RegisterOrganizationRequest, RegisterOrganizationResponse, OrganizationSummary
)
from app.services.organization_service import OrganizationService
from app.services.sheets_service import SheetsService
from app.dependencies import get_sheets_service
import logging

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Organizations"])


@router.post("/register-org", response_model=RegisterOrganizationResponse)
async def register_organization(
    org_data: RegisterOrganizationRequest,
    db: AsyncSession = Depends(get_async_session),
    sheets: SheetsService = Depends(get_sheets_service)
):
    """Create an organization together with its first admin"""
    org_service = OrganizationService(db)

    try:
        organization = await org_service.register_organization(org_data, sheets)
    except Exception as e:
        logger.error(f"Organization registration failed for '{org_data.organization_name}': {e}")
        raise

    return RegisterOrganizationResponse(
        organization=OrganizationSummary.model_validate(organization)
    )


@router.get("/organizations/{slug}", response_model=OrganizationSummary)
async def get_organization_by_slug(
    slug: str,
    db: AsyncSession = Depends(get_async_session)
):
    """Public lookup used by the sign-up page"""
    org_service = OrganizationService(db)
    organization = await org_service.get_organization_by_slug(slug)

    if not organization:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Organization not found"
        )

    return organization

"""
Organization service layer
"""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import select, delete
from typing import Optional, Tuple, List
from fastapi import HTTPException, status
import logging

from app.config import settings
from app.models import Organization, NotificationRecipient
from app.schemas import RegisterOrganizationRequest, OrganizationUpdate
from app.schemas.base import UserRole
from app.services.auth_service import AuthService
from app.services.sheets_service import SheetsService, SheetAccessError
from app.utils.helpers import generate_slug

logger = logging.getLogger(__name__)


class OrganizationService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_organization_by_id(self, org_id: str) -> Optional[Organization]:
        """Get organization by ID"""
        stmt = select(Organization).where(Organization.id == org_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_organization_by_slug(self, slug: str) -> Optional[Organization]:
        """Get organization by slug"""
        stmt = select(Organization).where(Organization.slug == slug)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def require_organization(self, org_id: str) -> Organization:
        organization = await self.get_organization_by_id(org_id)
        if not organization:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Organization not found"
            )
        return organization

    async def generate_unique_slug(self, name: str) -> str:
        """Slug for the name, suffixed -1, -2, ... until unused"""
        base_slug = generate_slug(name)
        slug = base_slug
        counter = 1
        while await self.get_organization_by_slug(slug):
            slug = f"{base_slug}-{counter}"
            counter += 1
        return slug

    async def register_organization(
        self,
        data: RegisterOrganizationRequest,
        sheets: Optional[SheetsService] = None
    ) -> Organization:
        """
        Create an organization with its first admin.

        The organization row is deleted again if the admin identity cannot be
        created, so a failed registration leaves nothing behind.
        """
        fields = [data.organization_name, data.admin_name, data.admin_email, data.password]
        if not all(value and value.strip() for value in fields):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="All fields are required"
            )

        auth_service = AuthService(self.db)
        auth_service.validate_password(data.password)

        organization_name = data.organization_name.strip()
        admin_email = data.admin_email.strip().lower()
        slug = await self.generate_unique_slug(organization_name)

        organization = Organization(
            name=organization_name,
            slug=slug,
            admin_email=admin_email,
            settings={}
        )
        try:
            self.db.add(organization)
            await self.db.commit()
            await self.db.refresh(organization)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Error creating organization '{organization_name}': {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to create organization"
            )

        org_id = organization.id
        try:
            admin = await auth_service.create_identity(
                email=admin_email,
                password=data.password,
                full_name=data.admin_name,
                role=UserRole.ADMIN,
                organization_id=org_id
            )
        except HTTPException as e:
            logger.error(f"Error creating admin user for organization {org_id}: {e.detail}")
            await self.db.rollback()
            await self._delete_organization(org_id)
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.detail)
        except Exception as e:
            logger.error(f"Unexpected error creating admin user for organization {org_id}: {e}")
            await self.db.rollback()
            await self._delete_organization(org_id)
            raise

        try:
            self.db.add(NotificationRecipient(
                email=admin.email,
                name=admin.full_name,
                is_active=True,
                added_by=admin.id,
                organization_id=org_id
            ))
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to add {admin_email} as notification recipient for {org_id}: {e}")

        if sheets is not None and settings.auto_create_org_sheet:
            await self._provision_sheet(org_id, organization_name, admin_email, sheets)

        organization = await self.require_organization(org_id)
        logger.info(f"Organization registered: {organization.name} ({organization.slug})")
        return organization

    async def update_organization(self, org_id: str, data: OrganizationUpdate) -> Organization:
        organization = await self.require_organization(org_id)

        if data.name is not None:
            organization.name = data.name.strip()
        if data.settings is not None:
            organization.settings = {**(organization.settings or {}), **data.settings}

        await self.db.commit()
        await self.db.refresh(organization)
        logger.info(f"Organization updated: {organization.id}")
        return organization

    async def link_sheet(self, org_id: str, sheet_id: Optional[str]) -> Organization:
        if not sheet_id or not sheet_id.strip():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Sheet ID is required"
            )

        organization = await self.require_organization(org_id)
        organization.google_sheet_id = sheet_id.strip()
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to update organization {org_id} with sheet ID: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to save sheet ID to database"
            )

        logger.info(f"Sheet {sheet_id} linked to organization {org_id}")
        return organization

    async def test_sheet(self, sheet_id: Optional[str], sheets: SheetsService) -> Tuple[str, List[str]]:
        if not sheet_id or not sheet_id.strip():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Sheet ID is required"
            )
        if not sheets.configured:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Google credentials not configured on server"
            )

        try:
            return await sheets.get_sheet_info(sheet_id.strip())
        except SheetAccessError as e:
            if e.status == 404:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Sheet not found. Check the ID and try again."
                )
            if e.status == 403:
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail="Access denied. Make sure the sheet is shared with the service account."
                )
            logger.error(f"Error testing sheet {sheet_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to test sheet connection"
            )

    async def create_sheet(self, org_id: str, sheets: SheetsService) -> Tuple[str, str]:
        organization = await self.require_organization(org_id)
        if not sheets.configured:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Google credentials not configured on server"
            )

        try:
            spreadsheet_id, spreadsheet_url = await sheets.create_organization_sheet(
                organization.name, organization.admin_email
            )
        except SheetAccessError as e:
            logger.error(f"Failed to create Google Sheet for organization {org_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to create Google Sheet"
            )

        organization.google_sheet_id = spreadsheet_id
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to update organization {org_id} with sheet ID: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Sheet created but failed to save ID to database"
            )

        return spreadsheet_id, spreadsheet_url

    async def _provision_sheet(self, org_id: str, name: str, admin_email: str, sheets: SheetsService) -> None:
        """Best-effort sheet creation during registration"""
        try:
            spreadsheet_id, _ = await sheets.create_organization_sheet(name, admin_email)
            organization = await self.require_organization(org_id)
            organization.google_sheet_id = spreadsheet_id
            await self.db.commit()
        except (SheetAccessError, SQLAlchemyError) as e:
            await self.db.rollback()
            logger.warning(f"Could not provision a Google Sheet for organization {org_id}: {e}")

    async def _delete_organization(self, org_id: str) -> None:
        await self.db.execute(delete(Organization).where(Organization.id == org_id))
        await self.db.commit()
        logger.info(f"Rolled back organization {org_id}")

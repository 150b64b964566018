"""
Organization admin API routes: spreadsheet linking, organization settings
and employee roles
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from app.database import get_async_session
from app.schemas import (
    SheetRequest, CreateSheetRequest, LinkSheetResponse, TestSheetResponse,
    CreateSheetResponse, OrganizationUpdate, OrganizationResponse,
    ProfileResponse, ProfileRoleUpdate
)
from app.services.organization_service import OrganizationService
from app.services.employee_service import EmployeeService
from app.services.sheets_service import SheetsService
from app.dependencies import get_current_user, get_current_admin, get_sheets_service
from app.models import Profile
from app.utils.access import ensure_org_admin
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post("/link-sheet", response_model=LinkSheetResponse)
async def link_sheet(
    sheet_data: SheetRequest,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session)
):
    """Store an existing spreadsheet id on the organization"""
    ensure_org_admin(current_user, sheet_data.organization_id)
    org_service = OrganizationService(db)

    await org_service.link_sheet(sheet_data.organization_id, sheet_data.sheet_id)
    return LinkSheetResponse()


@router.post("/test-sheet", response_model=TestSheetResponse)
async def test_sheet(
    sheet_data: SheetRequest,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
    sheets: SheetsService = Depends(get_sheets_service)
):
    """Check that the service account can open the spreadsheet"""
    ensure_org_admin(current_user, sheet_data.organization_id)
    org_service = OrganizationService(db)

    title, tabs = await org_service.test_sheet(sheet_data.sheet_id, sheets)
    return TestSheetResponse(sheet_title=title, tabs=tabs)


@router.post("/create-sheet", response_model=CreateSheetResponse)
async def create_sheet(
    sheet_data: CreateSheetRequest,
    current_user: Profile = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
    sheets: SheetsService = Depends(get_sheets_service)
):
    """Create the organization's submissions spreadsheet and link it"""
    ensure_org_admin(current_user, sheet_data.organization_id)
    org_service = OrganizationService(db)

    try:
        spreadsheet_id, spreadsheet_url = await org_service.create_sheet(
            sheet_data.organization_id, sheets
        )
    except Exception as e:
        logger.error(f"Sheet creation failed for organization {sheet_data.organization_id}: {e}")
        raise

    logger.info(f"Sheet {spreadsheet_id} created for organization {sheet_data.organization_id}")
    return CreateSheetResponse(spreadsheet_id=spreadsheet_id, spreadsheet_url=spreadsheet_url)


@router.patch("/organization", response_model=OrganizationResponse)
async def update_organization(
    org_data: OrganizationUpdate,
    current_user: Profile = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_session)
):
    """Rename the organization or merge new settings into it"""
    organization_id = org_data.organization_id or current_user.organization_id
    ensure_org_admin(current_user, organization_id)
    org_service = OrganizationService(db)

    return await org_service.update_organization(organization_id, org_data)


@router.get("/employees", response_model=List[ProfileResponse])
async def list_employees(
    current_user: Profile = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_session)
):
    """List profiles in the admin's organization"""
    employee_service = EmployeeService(db)
    return await employee_service.list_employees(current_user)


@router.patch("/employees/{profile_id}", response_model=ProfileResponse)
async def update_employee_role(
    profile_id: str,
    role_data: ProfileRoleUpdate,
    current_user: Profile = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_session)
):
    """Promote or demote an employee"""
    employee_service = EmployeeService(db)
    return await employee_service.update_role(current_user, profile_id, role_data.role)

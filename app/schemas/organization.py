"""
Organization-related schemas
"""
from pydantic import Field
from typing import Optional, List, Dict, Any
from app.schemas.base import CamelModel, UUIDSchema, TimestampSchema


class RegisterOrganizationRequest(CamelModel):
    # Presence is checked by the service so the caller gets "All fields are required"
    organization_name: Optional[str] = None
    admin_name: Optional[str] = None
    admin_email: Optional[str] = None
    password: Optional[str] = None


class OrganizationSummary(CamelModel):
    id: str
    name: str
    slug: str


class RegisterOrganizationResponse(CamelModel):
    success: bool = True
    organization: OrganizationSummary


class OrganizationResponse(UUIDSchema, TimestampSchema):
    name: str
    slug: str
    admin_email: str
    google_sheet_id: Optional[str] = None
    settings: Dict[str, Any] = {}


class OrganizationUpdate(CamelModel):
    organization_id: Optional[str] = None
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    settings: Optional[Dict[str, Any]] = None


class SheetRequest(CamelModel):
    """Body shared by the link-sheet and test-sheet endpoints"""
    organization_id: Optional[str] = None
    sheet_id: Optional[str] = None


class CreateSheetRequest(CamelModel):
    organization_id: Optional[str] = None


class LinkSheetResponse(CamelModel):
    success: bool = True
    message: str = "Sheet linked successfully"


class TestSheetResponse(CamelModel):
    success: bool = True
    sheet_title: str
    tabs: List[str] = []


class CreateSheetResponse(CamelModel):
    success: bool = True
    spreadsheet_id: str
    spreadsheet_url: str

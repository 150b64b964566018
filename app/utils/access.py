"""
Organization-scoped authorization checks.

The can_access_* checks are pure: they compare the caller's profile against
the organization id a request targets and never touch the database.
"""
from typing import Optional, Protocol
from fastapi import HTTPException, status
import logging

logger = logging.getLogger(__name__)


class OrganizationMember(Protocol):
    organization_id: Optional[str]
    role: str


def can_access_organization(profile: Optional[OrganizationMember], requested_org_id: Optional[str]) -> bool:
    """True when the profile belongs to exactly the requested organization."""
    if profile is None or profile.organization_id is None:
        return False
    return profile.organization_id == requested_org_id


def can_access_admin_route(profile: Optional[OrganizationMember], requested_org_id: Optional[str]) -> bool:
    """True when the profile is an admin of exactly the requested organization."""
    return can_access_organization(profile, requested_org_id) and profile.role == "admin"


def ensure_org_admin(profile: OrganizationMember, organization_id: Optional[str]) -> None:
    """
    Raise 403 unless the profile is an admin of the requested organization.

    The role is checked first, so a staff member always sees
    "Admin access required" whatever organization they target.
    """
    if profile.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden - Admin access required"
        )
    if not can_access_admin_route(profile, organization_id):
        logger.warning(
            f"Admin of organization {profile.organization_id} denied access to organization {organization_id}"
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden - Organization mismatch"
        )

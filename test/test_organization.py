"""
Test suite for organization provisioning and the admin spreadsheet endpoints.
"""
import pytest
from unittest.mock import patch
from httpx import AsyncClient, ASGITransport
from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from main import app
from app.models import Organization, Profile, NotificationRecipient
from app.services.auth_service import AuthService
from app.services.sheets_service import SheetAccessError
from conftest import FakeSheetsService, create_profile


def registration(**overrides) -> dict:
    data = {
        "organizationName": "Test Clinic",
        "adminName": "Ada Admin",
        "adminEmail": "a@b.com",
        "password": "secret1",
    }
    data.update(overrides)
    return data


class TestRegisterOrganization:

    async def test_register_then_sign_in(self, client: AsyncClient, db_session: AsyncSession):
        response = await client.post("/api/register-org", json=registration())

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["organization"]["slug"] == "test-clinic"
        assert data["organization"]["name"] == "Test Clinic"

        login = await client.post("/api/auth/login", json={"email": "a@b.com", "password": "secret1"})
        assert login.status_code == 200
        user = login.json()["user"]
        assert user["role"] == "admin"
        assert user["organizationId"] == data["organization"]["id"]

    async def test_admin_becomes_notification_recipient(self, client: AsyncClient, db_session: AsyncSession):
        response = await client.post("/api/register-org", json=registration())
        org_id = response.json()["organization"]["id"]

        result = await db_session.execute(
            select(NotificationRecipient).where(NotificationRecipient.organization_id == org_id)
        )
        recipients = result.scalars().all()
        assert [r.email for r in recipients] == ["a@b.com"]
        assert recipients[0].is_active is True

    async def test_slug_collision_gets_suffix(self, client: AsyncClient):
        first = await client.post("/api/register-org", json=registration())
        second = await client.post("/api/register-org", json=registration(adminEmail="c@d.com"))
        third = await client.post("/api/register-org", json=registration(adminEmail="e@f.com"))

        assert first.json()["organization"]["slug"] == "test-clinic"
        assert second.json()["organization"]["slug"] == "test-clinic-1"
        assert third.json()["organization"]["slug"] == "test-clinic-2"

    @pytest.mark.parametrize("missing", ["organizationName", "adminName", "adminEmail", "password"])
    async def test_missing_field(self, client: AsyncClient, missing: str):
        data = registration()
        data.pop(missing)

        response = await client.post("/api/register-org", json=data)

        assert response.status_code == 400
        assert response.json() == {"error": "All fields are required"}

    async def test_short_password(self, client: AsyncClient, db_session: AsyncSession):
        response = await client.post("/api/register-org", json=registration(password="12345"))

        assert response.status_code == 400
        assert response.json() == {"error": "Password must be at least 6 characters"}
        result = await db_session.execute(select(Organization))
        assert result.scalars().all() == []

    async def test_failed_admin_creation_removes_organization(
        self, client: AsyncClient, db_session: AsyncSession
    ):
        await create_profile(db_session, None, email="a@b.com")

        response = await client.post("/api/register-org", json=registration())

        assert response.status_code == 400
        assert response.json()["error"] == "A user with this email address has already been registered"
        result = await db_session.execute(select(Organization.id))
        assert result.scalars().all() == []

    async def test_database_error_during_admin_creation_removes_organization(
        self, client: AsyncClient, db_session: AsyncSession
    ):
        failure = OperationalError("INSERT INTO profiles", {}, Exception("connection lost"))

        # The outer client would re-raise the error; this one returns the 500 response
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as raw_client:
            with patch.object(AuthService, "create_identity", side_effect=failure):
                response = await raw_client.post("/api/register-org", json=registration())

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}
        result = await db_session.execute(select(Organization.slug))
        assert result.scalars().all() == []

    async def test_lookup_by_slug(self, client: AsyncClient):
        created = await client.post("/api/register-org", json=registration())

        response = await client.get("/api/organizations/test-clinic")
        assert response.status_code == 200
        assert response.json() == created.json()["organization"]

        missing = await client.get("/api/organizations/nowhere")
        assert missing.status_code == 404
        assert missing.json() == {"error": "Organization not found"}


class TestSheetEndpoints:

    async def test_link_sheet(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        test_organization: Organization,
        admin_headers: dict
    ):
        response = await client.post("/api/admin/link-sheet", headers=admin_headers, json={
            "organizationId": test_organization.id,
            "sheetId": " abc123 ",
        })

        assert response.status_code == 200
        assert response.json()["success"] is True
        await db_session.refresh(test_organization)
        assert test_organization.google_sheet_id == "abc123"

    async def test_link_sheet_requires_id(
        self, client: AsyncClient, test_organization: Organization, admin_headers: dict
    ):
        response = await client.post("/api/admin/link-sheet", headers=admin_headers, json={
            "organizationId": test_organization.id,
            "sheetId": "",
        })
        assert response.status_code == 400
        assert response.json() == {"error": "Sheet ID is required"}

    async def test_requires_authentication(self, client: AsyncClient, test_organization: Organization):
        response = await client.post("/api/admin/link-sheet", json={
            "organizationId": test_organization.id,
            "sheetId": "abc",
        })
        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    @pytest.mark.parametrize("path", ["/api/admin/link-sheet", "/api/admin/test-sheet", "/api/admin/create-sheet"])
    async def test_admin_of_other_organization_is_forbidden(
        self,
        client: AsyncClient,
        other_organization: Organization,
        admin_headers: dict,
        path: str
    ):
        response = await client.post(path, headers=admin_headers, json={
            "organizationId": other_organization.id,
            "sheetId": "abc",
        })
        assert response.status_code == 403
        assert response.json() == {"error": "Forbidden - Organization mismatch"}

    @pytest.mark.parametrize("target", ["own", "other"])
    async def test_staff_is_forbidden_regardless_of_organization(
        self,
        client: AsyncClient,
        test_organization: Organization,
        other_organization: Organization,
        staff_headers: dict,
        target: str
    ):
        org_id = test_organization.id if target == "own" else other_organization.id
        response = await client.post("/api/admin/link-sheet", headers=staff_headers, json={
            "organizationId": org_id,
            "sheetId": "abc",
        })
        assert response.status_code == 403
        assert response.json() == {"error": "Forbidden - Admin access required"}

    async def test_test_sheet(
        self, client: AsyncClient, test_organization: Organization, admin_headers: dict
    ):
        response = await client.post("/api/admin/test-sheet", headers=admin_headers, json={
            "organizationId": test_organization.id,
            "sheetId": "abc",
        })
        assert response.status_code == 200
        assert response.json()["sheetTitle"] == "Clinic Submissions"
        assert "Day Off Requests" in response.json()["tabs"]

    @pytest.mark.parametrize("upstream,expected_status,message", [
        (404, 404, "Sheet not found. Check the ID and try again."),
        (403, 403, "Access denied. Make sure the sheet is shared with the service account."),
        (500, 500, "Failed to test sheet connection"),
    ])
    async def test_test_sheet_upstream_errors(
        self,
        client: AsyncClient,
        test_organization: Organization,
        admin_headers: dict,
        fake_sheets: FakeSheetsService,
        upstream: int,
        expected_status: int,
        message: str
    ):
        fake_sheets.info_error = SheetAccessError("upstream", status=upstream)

        response = await client.post("/api/admin/test-sheet", headers=admin_headers, json={
            "organizationId": test_organization.id,
            "sheetId": "abc",
        })
        assert response.status_code == expected_status
        assert response.json() == {"error": message}

    async def test_test_sheet_without_credentials(
        self,
        client: AsyncClient,
        test_organization: Organization,
        admin_headers: dict,
        fake_sheets: FakeSheetsService
    ):
        fake_sheets.configured = False

        response = await client.post("/api/admin/test-sheet", headers=admin_headers, json={
            "organizationId": test_organization.id,
            "sheetId": "abc",
        })
        assert response.status_code == 500
        assert response.json() == {"error": "Google credentials not configured on server"}

    async def test_create_sheet(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        test_organization: Organization,
        admin_headers: dict,
        fake_sheets: FakeSheetsService
    ):
        response = await client.post("/api/admin/create-sheet", headers=admin_headers, json={
            "organizationId": test_organization.id,
        })

        assert response.status_code == 200
        data = response.json()
        assert data["spreadsheetId"] == "sheet-1"
        assert data["spreadsheetUrl"].endswith("/sheet-1")
        assert fake_sheets.created == [("Test Clinic", "owner@example.com")]
        await db_session.refresh(test_organization)
        assert test_organization.google_sheet_id == "sheet-1"

    async def test_create_sheet_failure(
        self,
        client: AsyncClient,
        test_organization: Organization,
        admin_headers: dict,
        fake_sheets: FakeSheetsService
    ):
        fake_sheets.create_error = SheetAccessError("quota", status=429)

        response = await client.post("/api/admin/create-sheet", headers=admin_headers, json={
            "organizationId": test_organization.id,
        })
        assert response.status_code == 500
        assert response.json() == {"error": "Failed to create Google Sheet"}


class TestOrganizationSettings:

    async def test_rename_and_merge_settings(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        test_organization: Organization,
        admin_headers: dict
    ):
        test_organization.settings = {"theme": "blue"}
        await db_session.commit()

        response = await client.patch("/api/admin/organization", headers=admin_headers, json={
            "organizationId": test_organization.id,
            "name": "Renamed Clinic",
            "settings": {"timezone": "America/Vancouver"},
        })

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Renamed Clinic"
        assert data["settings"] == {"theme": "blue", "timezone": "America/Vancouver"}

    async def test_other_organization_is_forbidden(
        self, client: AsyncClient, other_organization: Organization, admin_headers: dict
    ):
        response = await client.patch("/api/admin/organization", headers=admin_headers, json={
            "organizationId": other_organization.id,
            "name": "Hijacked",
        })
        assert response.status_code == 403

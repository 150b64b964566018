"""
Tests for the notification fan-out: spreadsheet logging, recipient
resolution and email delivery, each isolated from the others.
"""
import pytest
from datetime import date
from unittest.mock import patch
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models import Organization
from app.schemas import NewRequestEvent, OvertimeRequestEvent
from app.schemas.base import NotificationType
from app.services.notification_service import NotificationService
from app.services.sheets_service import SheetAccessError
from conftest import FakeEmailService, FakeSheetsService, add_recipient, create_organization


def day_off_event(organization_id=None) -> NewRequestEvent:
    return NewRequestEvent(
        organization_id=organization_id,
        employee_name="Sam Staff",
        employee_email="sam@example.com",
        start_date=date(2025, 3, 10),
        end_date=date(2025, 3, 10),
        reason="Appointment",
        pay_period_label="PP5",
    )


class TestSubmissionFanOut:

    async def test_without_gmail_still_logs_to_sheet(
        self, db_session: AsyncSession, test_organization: Organization
    ):
        await add_recipient(db_session, test_organization, "hr@example.com")
        email = FakeEmailService(configured=False)
        sheets = FakeSheetsService()
        notifier = NotificationService(db_session, email, sheets, settings)

        result = await notifier.notify_submission(day_off_event(), test_organization.id)

        assert result.success is True
        assert result.email_sent is False
        assert sheets.append_calls == 1
        assert email.sent == []

    async def test_sheet_row_goes_to_organization_sheet(self, db_session: AsyncSession):
        organization = await create_organization(db_session, google_sheet_id="org-sheet")
        sheets = FakeSheetsService()
        notifier = NotificationService(db_session, FakeEmailService(), sheets, settings)

        await notifier.notify_submission(day_off_event(), organization.id)

        tab, sheet_id, values = sheets.rows[0]
        assert tab == "Day Off Requests"
        assert sheet_id == "org-sheet"
        assert len(values) == 14

    async def test_sends_to_active_recipients(
        self, db_session: AsyncSession, test_organization: Organization
    ):
        await add_recipient(db_session, test_organization, "hr@example.com")
        await add_recipient(db_session, test_organization, "off@example.com", is_active=False)
        email = FakeEmailService(configured=True)
        notifier = NotificationService(db_session, email, FakeSheetsService(), settings)

        result = await notifier.notify_submission(day_off_event(), test_organization.id)

        assert result.email_sent is True
        assert result.message_id
        assert len(email.sent) == 1
        assert email.sent[0]["to"] == ["hr@example.com"]
        assert email.sent[0]["subject"] == "New Time-Off Request from Sam Staff"
        assert "Monday, March 10, 2025" in email.sent[0]["html"]

    async def test_empty_recipient_list_does_not_fall_back(
        self, db_session: AsyncSession, test_organization: Organization
    ):
        await add_recipient(db_session, test_organization, "off@example.com", is_active=False)
        email = FakeEmailService(configured=True)
        notifier = NotificationService(db_session, email, FakeSheetsService(), settings)
        assert settings.fallback_recipients == ["fallback@example.com"]

        result = await notifier.notify_submission(day_off_event(), test_organization.id)

        assert result.email_sent is False
        assert email.sent == []

    async def test_failed_recipient_lookup_falls_back(
        self, db_session: AsyncSession, test_organization: Organization
    ):
        email = FakeEmailService(configured=True)
        notifier = NotificationService(db_session, email, FakeSheetsService(), settings)

        original_execute = db_session.execute

        async def failing_execute(statement, *args, **kwargs):
            if "notification_recipients" in str(statement):
                raise OperationalError(str(statement), {}, Exception("connection lost"))
            return await original_execute(statement, *args, **kwargs)

        with patch.object(db_session, "execute", side_effect=failing_execute):
            result = await notifier.notify_submission(day_off_event(), test_organization.id)

        assert result.email_sent is True
        assert email.sent[0]["to"] == ["fallback@example.com"]

    async def test_sheet_failure_does_not_block_email(
        self, db_session: AsyncSession, test_organization: Organization
    ):
        await add_recipient(db_session, test_organization, "hr@example.com")
        email = FakeEmailService(configured=True)
        sheets = FakeSheetsService()
        sheets.append_error = SheetAccessError("quota exceeded", status=429)
        notifier = NotificationService(db_session, email, sheets, settings)

        result = await notifier.notify_submission(day_off_event(), test_organization.id)

        assert sheets.append_calls == 1
        assert result.email_sent is True

    async def test_send_failure_reports_email_not_sent(
        self, db_session: AsyncSession, test_organization: Organization
    ):
        await add_recipient(db_session, test_organization, "hr@example.com")
        sheets = FakeSheetsService()
        notifier = NotificationService(
            db_session, FakeEmailService(configured=True, fail=True), sheets, settings
        )

        result = await notifier.notify_submission(day_off_event(), test_organization.id)

        assert result.success is True
        assert result.email_sent is False
        assert sheets.append_calls == 1


class TestSendEndpoint:

    async def test_anonymous_submission_uses_fallback_recipients(
        self, client: AsyncClient, fake_email: FakeEmailService, fake_sheets: FakeSheetsService
    ):
        response = await client.post("/api/notifications/send", json={
            "type": "overtime_request",
            "employeeName": "Sam Staff",
            "employeeEmail": "sam@example.com",
            "overtimeDate": "2025-03-03",
            "askedDoctor": True,
            "payPeriodLabel": "PP5",
        })

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert response.json()["emailSent"] is True
        assert fake_email.sent[0]["to"] == ["fallback@example.com"]
        assert fake_email.sent[0]["subject"] == "Overtime Submission from Sam Staff"
        assert fake_sheets.rows[0][0] == "Overtime Requests"

    async def test_signed_in_submission_uses_profile_organization(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        test_organization: Organization,
        other_organization: Organization,
        staff_headers: dict,
        fake_email: FakeEmailService
    ):
        await add_recipient(db_session, test_organization, "hr@example.com")
        await add_recipient(db_session, other_organization, "other@example.com")

        response = await client.post("/api/notifications/send", headers=staff_headers, json={
            "type": "sick_day_request",
            "organizationId": other_organization.id,
            "employeeName": "Sam Staff",
            "employeeEmail": "sam@example.com",
            "sickDate": "2025-03-03",
        })

        assert response.status_code == 200
        assert fake_email.sent[0]["to"] == ["hr@example.com"]

    async def test_unknown_type_is_rejected(self, client: AsyncClient):
        response = await client.post("/api/notifications/send", json={"type": "party_request"})
        assert response.status_code == 400
        assert "error" in response.json()

    async def test_overtime_requires_senior_staff_when_doctor_not_asked(self, client: AsyncClient):
        response = await client.post("/api/notifications/send", json={
            "type": "overtime_request",
            "employeeName": "Sam Staff",
            "employeeEmail": "sam@example.com",
            "overtimeDate": "2025-03-03",
            "askedDoctor": False,
            "payPeriodLabel": "PP5",
        })
        assert response.status_code == 400
        assert response.json()["error"] == "Senior staff name is required when the doctor was not asked"

    async def test_decision_event_requires_sign_in(self, client: AsyncClient):
        response = await client.post("/api/notifications/send", json={
            "type": "approved",
            "requestId": "missing",
        })
        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}


def test_overtime_event_validation():
    with pytest.raises(ValueError):
        OvertimeRequestEvent(
            employee_name="Sam",
            employee_email="sam@example.com",
            overtime_date=date(2025, 3, 3),
            pay_period_label="PP5",
        )


class TestTenantRouting:

    async def test_anonymous_submission_cannot_target_an_organization(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        fake_email: FakeEmailService,
        fake_sheets: FakeSheetsService
    ):
        tenant = await create_organization(db_session, name="Tenant Clinic", google_sheet_id="tenant-sheet")
        await add_recipient(db_session, tenant, "tenant-hr@example.com")

        response = await client.post("/api/notifications/send", json={
            "type": "new_request",
            "organizationId": tenant.id,
            "employeeName": "Sam Staff",
            "employeeEmail": "sam@example.com",
            "startDate": "2025-03-10",
            "endDate": "2025-03-10",
        })

        assert response.status_code == 200
        assert [sheet_id for _, sheet_id, _ in fake_sheets.rows] == [None]
        assert [m["to"] for m in fake_email.sent] == [["fallback@example.com"]]

    async def test_failed_sheet_lookup_keeps_recipient_lookup_working(
        self, db_session: AsyncSession, test_organization: Organization
    ):
        await add_recipient(db_session, test_organization, "hr@example.com")
        organization_id = test_organization.id
        email = FakeEmailService(configured=True)
        sheets = FakeSheetsService()
        notifier = NotificationService(db_session, email, sheets, settings)

        original_execute = db_session.execute

        async def failing_execute(statement, *args, **kwargs):
            if "google_sheet_id" in str(statement):
                raise OperationalError(str(statement), {}, Exception("connection lost"))
            return await original_execute(statement, *args, **kwargs)

        with patch.object(db_session, "execute", side_effect=failing_execute), \
                patch.object(db_session, "rollback", wraps=db_session.rollback) as rollback:
            result = await notifier.notify_submission(day_off_event(), organization_id)

        rollback.assert_awaited()
        assert sheets.append_calls == 0
        assert result.email_sent is True
        assert email.sent[0]["to"] == ["hr@example.com"]


@pytest.mark.parametrize("event_type,expected", [
    (NotificationType.APPROVED, True),
    (NotificationType.DENIED, True),
    (NotificationType.NEW_REQUEST, False),
    (NotificationType.SICK_DAY_REQUEST, False),
])
def test_decision_types(event_type, expected):
    assert event_type.is_decision is expected

"""
Test configuration and fixtures for StaffHub.
Provides an in-memory database, fake mail and Sheets collaborators, and
helpers for creating organizations and signed-in profiles.
"""
import os

# Settings are read at import time, so the environment must be set first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["DATABASE_URL_SYNC"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["NOTIFY_EMAILS"] = "fallback@example.com"
for name in ("GMAIL_USER", "GMAIL_APP_PASSWORD", "GOOGLE_SERVICE_ACCOUNT_EMAIL",
             "GOOGLE_PRIVATE_KEY", "GOOGLE_SHEET_ID", "AUTO_CREATE_ORG_SHEET"):
    os.environ.pop(name, None)

import pytest
import uuid
from typing import AsyncGenerator, List, Optional, Tuple
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from app.config import settings
from app.database import get_async_session
from app.dependencies import get_email_service, get_sheets_service
from app.models import Base, Organization, Profile, LeaveType, NotificationRecipient
from app.security import hash_password, create_access_token, create_token_data
from app.services.email_service import EmailService, EmailDeliveryError
from app.services.sheets_service import SheetAccessError
from app.utils.db_init import DEFAULT_LEAVE_TYPES

# Test database URL
TEST_DATABASE_URL = "sqlite+aiosqlite://"

# Create test engine
test_engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    poolclass=StaticPool,
    connect_args={"check_same_thread": False}
)

# Create test session factory
TestSessionLocal = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False
)

TEST_PASSWORD = "secret1"


class FakeEmailService(EmailService):
    """Renders the real templates but records messages instead of sending them."""

    def __init__(self, configured: bool = False, fail: bool = False):
        super().__init__(settings)
        self._configured = configured
        self.fail = fail
        self.sent: List[dict] = []
        if configured:
            self.username = "hr@example.com"

    @property
    def configured(self) -> bool:
        return self._configured

    async def send_mail(self, to, subject: str, html: str) -> str:
        if self.fail:
            raise EmailDeliveryError("SMTP unavailable")
        recipients = [to] if isinstance(to, str) else list(to)
        self.sent.append({"to": recipients, "subject": subject, "html": html})
        return f"<{uuid.uuid4().hex}@example.com>"


class FakeSheetsService:
    """In-memory stand-in for the Google Sheets/Drive client."""

    def __init__(self, configured: bool = True):
        self.configured = configured
        self.rows: List[Tuple[str, Optional[str], List[str]]] = []
        self.append_calls = 0
        self.append_error: Optional[Exception] = None
        self.info_error: Optional[SheetAccessError] = None
        self.create_error: Optional[SheetAccessError] = None
        self.created: List[Tuple[str, str]] = []

    async def append_row(self, values, tab_name, sheet_id=None) -> bool:
        self.append_calls += 1
        if self.append_error:
            raise self.append_error
        self.rows.append((tab_name, sheet_id, list(values)))
        return True

    async def get_sheet_info(self, sheet_id):
        if self.info_error:
            raise self.info_error
        return "Clinic Submissions", ["Day Off Requests", "Vacation Requests"]

    async def create_organization_sheet(self, organization_name, admin_email):
        if self.create_error:
            raise self.create_error
        self.created.append((organization_name, admin_email))
        spreadsheet_id = f"sheet-{len(self.created)}"
        return spreadsheet_id, f"https://docs.google.com/spreadsheets/d/{spreadsheet_id}"


@pytest.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    # Create all tables
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # Create session
    async with TestSessionLocal() as session:
        yield session

    # Drop all tables after test
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def fake_email() -> FakeEmailService:
    return FakeEmailService(configured=True)


@pytest.fixture
def fake_sheets() -> FakeSheetsService:
    return FakeSheetsService()


@pytest.fixture
async def client(
    db_session: AsyncSession,
    fake_email: FakeEmailService,
    fake_sheets: FakeSheetsService
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with database and collaborator overrides."""
    def get_test_db():
        return db_session

    app.dependency_overrides[get_async_session] = get_test_db
    app.dependency_overrides[get_email_service] = lambda: fake_email
    app.dependency_overrides[get_sheets_service] = lambda: fake_sheets

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def create_organization(
    db_session: AsyncSession,
    name: str = "Test Clinic",
    slug: Optional[str] = None,
    google_sheet_id: Optional[str] = None
) -> Organization:
    organization = Organization(
        name=name,
        slug=slug or f"{name.lower().replace(' ', '-')}-{uuid.uuid4().hex[:6]}",
        admin_email="owner@example.com",
        google_sheet_id=google_sheet_id,
        settings={}
    )
    db_session.add(organization)
    await db_session.commit()
    await db_session.refresh(organization)
    return organization


async def create_profile(
    db_session: AsyncSession,
    organization: Optional[Organization],
    email: Optional[str] = None,
    role: str = "staff",
    full_name: str = "Test User"
) -> Profile:
    profile = Profile(
        email=email or f"user_{uuid.uuid4().hex[:8]}@example.com",
        full_name=full_name,
        role=role,
        password_hash=hash_password(TEST_PASSWORD),
        organization_id=organization.id if organization else None,
        is_active=True
    )
    db_session.add(profile)
    await db_session.commit()
    await db_session.refresh(profile)
    return profile


async def add_recipient(
    db_session: AsyncSession,
    organization: Organization,
    email: str,
    is_active: bool = True
) -> NotificationRecipient:
    recipient = NotificationRecipient(email=email, is_active=is_active, organization_id=organization.id)
    db_session.add(recipient)
    await db_session.commit()
    return recipient


def auth_headers_for(profile: Profile) -> dict:
    """Bearer header for a profile."""
    token = create_access_token(
        create_token_data(profile.id, profile.email, profile.organization_id, profile.role)
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def test_organization(db_session: AsyncSession) -> Organization:
    return await create_organization(db_session)


@pytest.fixture
async def other_organization(db_session: AsyncSession) -> Organization:
    return await create_organization(db_session, name="Other Clinic")


@pytest.fixture
async def staff_user(db_session: AsyncSession, test_organization: Organization) -> Profile:
    return await create_profile(db_session, test_organization, email="staff@example.com", full_name="Sam Staff")


@pytest.fixture
async def admin_user(db_session: AsyncSession, test_organization: Organization) -> Profile:
    return await create_profile(
        db_session, test_organization, email="admin@example.com", role="admin", full_name="Ada Admin"
    )


@pytest.fixture
def staff_headers(staff_user: Profile) -> dict:
    return auth_headers_for(staff_user)


@pytest.fixture
def admin_headers(admin_user: Profile) -> dict:
    return auth_headers_for(admin_user)


@pytest.fixture
async def leave_types(db_session: AsyncSession) -> dict:
    """Default leave types keyed by name."""
    created = {}
    for data in DEFAULT_LEAVE_TYPES:
        leave_type = LeaveType(**data)
        db_session.add(leave_type)
        created[data["name"]] = leave_type
    await db_session.commit()
    return created

"""
Application configuration settings
"""
from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings"""

    # Application
    app_name: str = "StaffHub"
    app_version: str = "0.1.0"
    debug: bool = False
    app_url: str = Field(default="http://localhost:8000", description="Public URL used in email links")

    # Database
    database_url: str = Field(..., description="Async database URL")
    database_url_sync: str = Field(..., description="Sync database URL for Alembic")

    # Security
    secret_key: str = Field(..., description="Secret key for JWT tokens")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    min_password_length: int = 6

    # Email (Gmail SMTP)
    gmail_user: Optional[str] = Field(default=None, description="Gmail account used as sender")
    gmail_app_password: Optional[str] = Field(default=None, description="Gmail app password")
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_use_tls: bool = True
    email_from_name: str = "StaffHub"
    email_templates_dir: str = "app/templates/emails"
    notify_emails: Optional[str] = Field(default=None, description="Comma separated fallback recipients")

    # Google Sheets / Drive
    google_service_account_email: Optional[str] = None
    google_private_key: Optional[str] = None
    google_sheet_id: Optional[str] = Field(default=None, description="Fallback spreadsheet id")
    google_drive_folder_id: Optional[str] = None
    auto_create_org_sheet: bool = False

    # Sheet timestamps
    timezone: str = "America/Los_Angeles"

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def mail_configured(self) -> bool:
        return bool(self.gmail_user and self.gmail_app_password)

    @property
    def google_configured(self) -> bool:
        return bool(self.google_service_account_email and self.google_private_key)

    @property
    def fallback_recipients(self) -> List[str]:
        from app.utils.helpers import parse_email_list
        return parse_email_list(self.notify_emails)


settings = Settings()

"""
Organization (tenant) model
"""
from sqlalchemy import Column, String, JSON, Index
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.base import UUIDMixin, TimestampMixin


class Organization(Base, UUIDMixin, TimestampMixin):
    """Organization model"""
    __tablename__ = "organizations"

    name = Column(String(255), nullable=False)
    slug = Column(String(100), unique=True, nullable=False)
    admin_email = Column(String(255), nullable=False)
    google_sheet_id = Column(String(255), nullable=True)
    settings = Column(JSON, default=dict, nullable=False)

    # Relationships
    profiles = relationship("Profile", back_populates="organization")
    leave_requests = relationship("LeaveRequest", back_populates="organization", cascade="all, delete-orphan")
    notification_recipients = relationship(
        "NotificationRecipient", back_populates="organization", cascade="all, delete-orphan"
    )
    announcements = relationship("Announcement", back_populates="organization", cascade="all, delete-orphan")

    __table_args__ = (
        Index('ix_organizations_admin_email', 'admin_email'),
    )

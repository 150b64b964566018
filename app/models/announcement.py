"""
Announcement model
"""
from sqlalchemy import Column, String, Boolean, Text, ForeignKey, Index
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.base import UUIDMixin, TimestampMixin


class Announcement(Base, UUIDMixin, TimestampMixin):
    """Organization-wide announcement"""
    __tablename__ = "announcements"

    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    pinned = Column(Boolean, default=False, nullable=False)
    image_url = Column(String(500))
    organization_id = Column(String(36), ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False)

    organization = relationship("Organization", back_populates="announcements")

    __table_args__ = (
        Index('ix_announcements_organization_id', 'organization_id'),
        Index('ix_announcements_pinned_created', 'pinned', 'created_at'),
    )

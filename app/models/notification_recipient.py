"""
Notification recipient model
"""
from sqlalchemy import Column, String, Boolean, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.base import UUIDMixin, TimestampMixin


class NotificationRecipient(Base, UUIDMixin, TimestampMixin):
    """Admin-managed address that receives submission notifications"""
    __tablename__ = "notification_recipients"

    email = Column(String(255), nullable=False)
    name = Column(String(255))
    is_active = Column(Boolean, default=True, nullable=False)
    added_by = Column(String(36), ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    organization_id = Column(String(36), ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False)

    organization = relationship("Organization", back_populates="notification_recipients")

    __table_args__ = (
        UniqueConstraint('organization_id', 'email', name='uq_notification_recipients_org_email'),
        Index('ix_notification_recipients_is_active', 'is_active'),
        Index('ix_notification_recipients_organization_id', 'organization_id'),
    )

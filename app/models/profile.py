"""
Profile model - the application-level user record
"""
from sqlalchemy import Column, String, Boolean, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import relationship
from app.database import Base
from app.models.base import UUIDMixin, TimestampMixin


class Profile(Base, UUIDMixin, TimestampMixin):
    """Profile model; id doubles as the identity id"""
    __tablename__ = "profiles"

    email = Column(String(255), unique=True, nullable=False)
    full_name = Column(String(255), nullable=False)
    role = Column(String(20), default="staff", nullable=False)
    avatar_url = Column(String(500))
    password_hash = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Tenant; null until the profile is assigned to an organization
    organization_id = Column(String(36), ForeignKey("organizations.id", ondelete="SET NULL"), nullable=True)
    organization = relationship("Organization", back_populates="profiles")

    leave_requests = relationship(
        "LeaveRequest",
        back_populates="user",
        foreign_keys="LeaveRequest.user_id",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        CheckConstraint("role IN ('staff', 'admin')", name="ck_profiles_role"),
        Index('ix_profiles_organization_id', 'organization_id'),
    )

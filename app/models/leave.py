"""
Leave types, pay periods, leave requests and decision notifications
"""
from sqlalchemy import (
    Column, Integer, String, Boolean, Date, DateTime, Text, ForeignKey,
    Index, UniqueConstraint, CheckConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base
from app.models.base import UUIDMixin, TimestampMixin, CreatedAtMixin


class LeaveType(Base, UUIDMixin, CreatedAtMixin):
    """Reference data: kinds of leave a request can be filed under"""
    __tablename__ = "leave_types"

    name = Column(String(100), unique=True, nullable=False)
    color = Column(String(20), nullable=False)
    is_single_day = Column(Boolean, default=False, nullable=False)


class PayPeriod(Base, UUIDMixin, CreatedAtMixin):
    """Reference data: payroll periods for a tax year"""
    __tablename__ = "pay_periods"

    period_number = Column(Integer, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    t4_year = Column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint('period_number', 't4_year', name='uq_pay_period_number_year'),
        Index('ix_pay_periods_dates', 'start_date', 'end_date'),
    )


class LeaveRequest(Base, UUIDMixin, TimestampMixin):
    """A staff member's time-off request and its decision"""
    __tablename__ = "leave_requests"

    user_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    organization_id = Column(String(36), ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False)
    leave_type_id = Column(String(36), ForeignKey("leave_types.id"), nullable=False)
    pay_period_id = Column(String(36), ForeignKey("pay_periods.id"), nullable=True)

    submission_date = Column(Date, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    reason = Column(Text, nullable=False)
    coverage_name = Column(String(255))
    coverage_email = Column(String(255))

    # pending -> approved | denied, once
    status = Column(String(20), default="pending", nullable=False)
    reviewed_by = Column(String(36), ForeignKey("profiles.id"), nullable=True)
    reviewed_at = Column(DateTime(timezone=True))
    admin_notes = Column(Text)

    # Relationships
    user = relationship("Profile", back_populates="leave_requests", foreign_keys=[user_id])
    reviewer = relationship("Profile", foreign_keys=[reviewed_by])
    organization = relationship("Organization", back_populates="leave_requests")
    leave_type = relationship("LeaveType")
    pay_period = relationship("PayPeriod")
    dates = relationship("LeaveRequestDate", back_populates="request", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="ck_leave_requests_valid_date_range"),
        CheckConstraint("status IN ('pending', 'approved', 'denied')", name="ck_leave_requests_status"),
        Index('ix_leave_requests_user_id', 'user_id'),
        Index('ix_leave_requests_organization_id', 'organization_id'),
        Index('ix_leave_requests_status', 'status'),
        Index('ix_leave_requests_dates', 'start_date', 'end_date'),
    )


class LeaveRequestDate(Base, UUIDMixin, CreatedAtMixin):
    """Individual weekday covered by a leave request (calendar view)"""
    __tablename__ = "leave_request_dates"

    request_id = Column(String(36), ForeignKey("leave_requests.id", ondelete="CASCADE"), nullable=False)
    date = Column(Date, nullable=False)

    request = relationship("LeaveRequest", back_populates="dates")

    __table_args__ = (
        UniqueConstraint('request_id', 'date', name='uq_leave_request_date'),
        Index('ix_leave_request_dates_date', 'date'),
    )


class Notification(Base, UUIDMixin):
    """Log of decision notifications sent to requesters"""
    __tablename__ = "notifications"

    user_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    request_id = Column(String(36), ForeignKey("leave_requests.id", ondelete="CASCADE"), nullable=False)
    type = Column(String(50), nullable=False)
    sent_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    email_sent = Column(Boolean, default=False, nullable=False)

    __table_args__ = (
        Index('ix_notifications_user_id', 'user_id'),
        Index('ix_notifications_request_id', 'request_id'),
    )

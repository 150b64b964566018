"""
Base classes and mixins for database models
"""
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
import uuid


class CreatedAtMixin:
    """Mixin for append-only rows that only track creation time"""
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class TimestampMixin(CreatedAtMixin):
    """Mixin for created_at and updated_at timestamps"""
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


class UUIDMixin:
    """Mixin for UUID primary key"""
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()), nullable=False)

"""
Initial database schema creation.
This migration creates all tables for the StaffHub service.
Revision ID: 2025010101
Revises:
Create Date: 2025-01-01 01:00:00.000000
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic
revision = '2025010101'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps(updated: bool = True):
    columns = [sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)]
    if updated:
        columns.append(
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)
        )
    return columns


def upgrade() -> None:
    # Organizations table
    op.create_table(
        'organizations',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(100), nullable=False, unique=True),
        sa.Column('admin_email', sa.String(255), nullable=False),
        sa.Column('google_sheet_id', sa.String(255), nullable=True),
        sa.Column('settings', sa.JSON(), nullable=False),
        *_timestamps()
    )
    op.create_index('ix_organizations_admin_email', 'organizations', ['admin_email'])

    # Profiles table
    op.create_table(
        'profiles',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column('avatar_url', sa.String(500), nullable=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('organization_id', sa.String(36), sa.ForeignKey('organizations.id', ondelete='SET NULL'), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("role IN ('staff', 'admin')", name='ck_profiles_role')
    )
    op.create_index('ix_profiles_organization_id', 'profiles', ['organization_id'])

    # Leave types table
    op.create_table(
        'leave_types',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False, unique=True),
        sa.Column('color', sa.String(20), nullable=False),
        sa.Column('is_single_day', sa.Boolean(), nullable=False),
        *_timestamps(updated=False)
    )

    # Pay periods table
    op.create_table(
        'pay_periods',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('period_number', sa.Integer(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('t4_year', sa.Integer(), nullable=False),
        *_timestamps(updated=False),
        sa.UniqueConstraint('period_number', 't4_year', name='uq_pay_period_number_year')
    )
    op.create_index('ix_pay_periods_dates', 'pay_periods', ['start_date', 'end_date'])

    # Leave requests table
    op.create_table(
        'leave_requests',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('organization_id', sa.String(36), sa.ForeignKey('organizations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('leave_type_id', sa.String(36), sa.ForeignKey('leave_types.id'), nullable=False),
        sa.Column('pay_period_id', sa.String(36), sa.ForeignKey('pay_periods.id'), nullable=True),
        sa.Column('submission_date', sa.Date(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('reason', sa.Text(), nullable=False),
        sa.Column('coverage_name', sa.String(255), nullable=True),
        sa.Column('coverage_email', sa.String(255), nullable=True),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('reviewed_by', sa.String(36), sa.ForeignKey('profiles.id'), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('admin_notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('end_date >= start_date', name='ck_leave_requests_valid_date_range'),
        sa.CheckConstraint("status IN ('pending', 'approved', 'denied')", name='ck_leave_requests_status')
    )
    op.create_index('ix_leave_requests_user_id', 'leave_requests', ['user_id'])
    op.create_index('ix_leave_requests_organization_id', 'leave_requests', ['organization_id'])
    op.create_index('ix_leave_requests_status', 'leave_requests', ['status'])
    op.create_index('ix_leave_requests_dates', 'leave_requests', ['start_date', 'end_date'])

    # Leave request dates table
    op.create_table(
        'leave_request_dates',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('request_id', sa.String(36), sa.ForeignKey('leave_requests.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        *_timestamps(updated=False),
        sa.UniqueConstraint('request_id', 'date', name='uq_leave_request_date')
    )
    op.create_index('ix_leave_request_dates_date', 'leave_request_dates', ['date'])

    # Decision notifications table
    op.create_table(
        'notifications',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('profiles.id', ondelete='CASCADE'), nullable=False),
        sa.Column('request_id', sa.String(36), sa.ForeignKey('leave_requests.id', ondelete='CASCADE'), nullable=False),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('sent_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('email_sent', sa.Boolean(), nullable=False)
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])
    op.create_index('ix_notifications_request_id', 'notifications', ['request_id'])

    # Notification recipients table
    op.create_table(
        'notification_recipients',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('name', sa.String(255), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('added_by', sa.String(36), sa.ForeignKey('profiles.id', ondelete='SET NULL'), nullable=True),
        sa.Column('organization_id', sa.String(36), sa.ForeignKey('organizations.id', ondelete='CASCADE'), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('organization_id', 'email', name='uq_notification_recipients_org_email')
    )
    op.create_index('ix_notification_recipients_is_active', 'notification_recipients', ['is_active'])
    op.create_index('ix_notification_recipients_organization_id', 'notification_recipients', ['organization_id'])

    # Announcements table
    op.create_table(
        'announcements',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('pinned', sa.Boolean(), nullable=False),
        sa.Column('image_url', sa.String(500), nullable=True),
        sa.Column('organization_id', sa.String(36), sa.ForeignKey('organizations.id', ondelete='CASCADE'), nullable=False),
        *_timestamps()
    )
    op.create_index('ix_announcements_organization_id', 'announcements', ['organization_id'])
    op.create_index('ix_announcements_pinned_created', 'announcements', ['pinned', 'created_at'])


def downgrade() -> None:
    op.drop_table('announcements')
    op.drop_table('notification_recipients')
    op.drop_table('notifications')
    op.drop_table('leave_request_dates')
    op.drop_table('leave_requests')
    op.drop_table('pay_periods')
    op.drop_table('leave_types')
    op.drop_table('profiles')
    op.drop_table('organizations')

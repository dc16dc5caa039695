"""Create account, profile, impact and audit tables

Revision ID: 3f2a9c1d7e45
Revises:
Create Date: 2026-10-17 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# Revision identifiers used by Alembic
revision: str = '3f2a9c1d7e45'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _verification_columns():
    return [
        sa.Column('verification_status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('verification_notes', sa.Text(), nullable=True),
        sa.Column('verified_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('verified_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)')),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    # Accounts
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=32), nullable=True),
        sa.Column('avatar', sa.String(), nullable=True),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='individual'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='active'),
        sa.Column('email_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_role'), 'users', ['role'], unique=False)
    op.create_index(op.f('ix_users_status'), 'users', ['status'], unique=False)
    op.create_index(op.f('ix_users_created_at'), 'users', ['created_at'], unique=False)

    # Business and community profiles, one per account
    op.create_table(
        'business_profiles',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('business_name', sa.String(length=255), nullable=False),
        sa.Column('business_type', sa.String(length=100), nullable=False),
        sa.Column('gst_number', sa.String(length=32), nullable=True),
        sa.Column('msme_registration', sa.String(length=64), nullable=True),
        sa.Column('industry_sector', sa.String(length=100), nullable=True),
        sa.Column('address', sa.String(), nullable=True),
        sa.Column('city', sa.String(length=100), nullable=True),
        sa.Column('state', sa.String(length=100), nullable=True),
        sa.Column('pincode', sa.String(length=16), nullable=True),
        sa.Column('website', sa.String(), nullable=True),
        sa.Column('employee_count', sa.Integer(), nullable=True),
        sa.Column('annual_turnover', sa.String(length=64), nullable=True),
        *_verification_columns(),
    )
    op.create_index(op.f('ix_business_profiles_id'), 'business_profiles', ['id'], unique=False)
    op.create_index(op.f('ix_business_profiles_user_id'), 'business_profiles', ['user_id'], unique=True)
    op.create_index(op.f('ix_business_profiles_industry_sector'), 'business_profiles', ['industry_sector'], unique=False)
    op.create_index(op.f('ix_business_profiles_city'), 'business_profiles', ['city'], unique=False)
    op.create_index(op.f('ix_business_profiles_verification_status'), 'business_profiles', ['verification_status'], unique=False)

    op.create_table(
        'community_profiles',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('organization_name', sa.String(length=255), nullable=False),
        sa.Column('organization_type', sa.String(length=100), nullable=False),
        sa.Column('registration_number', sa.String(length=64), nullable=True),
        sa.Column('focus_areas', sa.JSON(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('address', sa.String(), nullable=True),
        sa.Column('city', sa.String(length=100), nullable=True),
        sa.Column('state', sa.String(length=100), nullable=True),
        sa.Column('pincode', sa.String(length=16), nullable=True),
        sa.Column('website', sa.String(), nullable=True),
        sa.Column('member_count', sa.Integer(), nullable=True),
        *_verification_columns(),
    )
    op.create_index(op.f('ix_community_profiles_id'), 'community_profiles', ['id'], unique=False)
    op.create_index(op.f('ix_community_profiles_user_id'), 'community_profiles', ['user_id'], unique=True)
    op.create_index(op.f('ix_community_profiles_organization_type'), 'community_profiles', ['organization_type'], unique=False)
    op.create_index(op.f('ix_community_profiles_city'), 'community_profiles', ['city'], unique=False)
    op.create_index(op.f('ix_community_profiles_verification_status'), 'community_profiles', ['verification_status'], unique=False)

    # Impact counters
    op.create_table(
        'user_impact',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('total_co2_saved', sa.Float(), nullable=False, server_default='0'),
        sa.Column('total_trees_planted', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_waste_exchanged', sa.Float(), nullable=False, server_default='0'),
        sa.Column('total_rides_taken', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_events_attended', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_volunteer_hours', sa.Float(), nullable=False, server_default='0'),
    )
    op.create_index(op.f('ix_user_impact_id'), 'user_impact', ['id'], unique=False)
    op.create_index(op.f('ix_user_impact_user_id'), 'user_impact', ['user_id'], unique=True)

    # Admin action log and activity log
    op.create_table(
        'admin_actions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('admin_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('action_type', sa.String(length=20), nullable=False),
        sa.Column('target_type', sa.String(length=20), nullable=False),
        sa.Column('target_id', sa.Integer(), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('previous_state', sa.JSON(), nullable=True),
        sa.Column('new_state', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)')),
    )
    op.create_index(op.f('ix_admin_actions_id'), 'admin_actions', ['id'], unique=False)
    op.create_index(op.f('ix_admin_actions_admin_id'), 'admin_actions', ['admin_id'], unique=False)
    op.create_index(op.f('ix_admin_actions_action_type'), 'admin_actions', ['action_type'], unique=False)
    op.create_index(op.f('ix_admin_actions_target_type'), 'admin_actions', ['target_type'], unique=False)
    op.create_index(op.f('ix_admin_actions_target_id'), 'admin_actions', ['target_id'], unique=False)
    op.create_index(op.f('ix_admin_actions_created_at'), 'admin_actions', ['created_at'], unique=False)

    op.create_table(
        'logs',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('ts', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)')),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('action', sa.String(length=50), nullable=True),
        sa.Column('resource', sa.String(length=50), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=True),
        sa.Column('ip', sa.String(length=64), nullable=True),
        sa.Column('meta', sa.JSON(), nullable=True),
    )
    op.create_index(op.f('ix_logs_id'), 'logs', ['id'], unique=False)
    op.create_index(op.f('ix_logs_ts'), 'logs', ['ts'], unique=False)
    op.create_index(op.f('ix_logs_action'), 'logs', ['action'], unique=False)
    op.create_index(op.f('ix_logs_resource'), 'logs', ['resource'], unique=False)
    op.create_index(op.f('ix_logs_status'), 'logs', ['status'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('logs')
    op.drop_table('admin_actions')
    op.drop_table('user_impact')
    op.drop_table('community_profiles')
    op.drop_table('business_profiles')
    op.drop_table('users')

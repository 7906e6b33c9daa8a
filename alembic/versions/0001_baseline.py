"""Baseline migration - identity, staff, inquiry and notification tables

Revision ID: 0001_baseline
Revises:
Create Date: 2026-10-19

Creates:
- users, departments, staff_profiles
- staff_roles, staff_role_permissions, staff_role_assignments
- inquiries, inquiry_messages, inquiry_internal_notes, inquiry_audits
- notifications

Quick-reply templates ship separately in 0002.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_baseline'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamp(name: str, nullable: bool = False) -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=nullable)


def upgrade() -> None:
    """Create identity, staff and inquiry tables."""

    # ==========================================================================
    # Identity
    # ==========================================================================
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('display_name', sa.String(255), nullable=False),
        sa.Column('role', sa.String(50), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        _timestamp('created_at'),
        sa.PrimaryKeyConstraint('id', name='pk_users'),
        sa.UniqueConstraint('email', name='uq_users_email'),
    )

    op.create_table(
        'departments',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('code', sa.String(50), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('access_prefix', sa.String(50), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('can_view_all_departments', sa.Boolean(), server_default=sa.false(), nullable=False),
        _timestamp('created_at'),
        sa.PrimaryKeyConstraint('id', name='pk_departments'),
        sa.UniqueConstraint('code', name='uq_departments_code'),
    )

    # ==========================================================================
    # Staff
    # ==========================================================================
    op.create_table(
        'staff_profiles',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('department_id', sa.Uuid(), nullable=False),
        sa.Column('status', sa.String(32), nullable=False),
        _timestamp('created_at'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_staff_profiles_user_id_users', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['department_id'], ['departments.id'], name='fk_staff_profiles_department_id_departments', ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id', name='pk_staff_profiles'),
    )
    op.create_index('idx_staff_profiles_user_status', 'staff_profiles', ['user_id', 'status'])
    op.create_index('idx_staff_profiles_department_status', 'staff_profiles', ['department_id', 'status'])

    op.create_table(
        'staff_roles',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        _timestamp('created_at'),
        sa.PrimaryKeyConstraint('id', name='pk_staff_roles'),
        sa.UniqueConstraint('name', name='uq_staff_roles_name'),
    )

    op.create_table(
        'staff_role_permissions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('role_id', sa.Uuid(), nullable=False),
        sa.Column('permission_key', sa.String(100), nullable=False),
        sa.ForeignKeyConstraint(['role_id'], ['staff_roles.id'], name='fk_staff_role_permissions_role_id_staff_roles', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_staff_role_permissions'),
        sa.UniqueConstraint('role_id', 'permission_key', name='uq_staff_role_permission'),
    )

    op.create_table(
        'staff_role_assignments',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('staff_profile_id', sa.Uuid(), nullable=False),
        sa.Column('role_id', sa.Uuid(), nullable=False),
        sa.Column('effective_from', sa.DateTime(timezone=True), nullable=False),
        sa.Column('effective_to', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['staff_profile_id'], ['staff_profiles.id'], name='fk_staff_role_assignments_staff_profile_id_staff_profiles', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['role_id'], ['staff_roles.id'], name='fk_staff_role_assignments_role_id_staff_roles', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_staff_role_assignments'),
    )
    op.create_index('idx_staff_role_assignments_profile', 'staff_role_assignments', ['staff_profile_id', 'effective_from'])

    # ==========================================================================
    # Inquiries
    # ==========================================================================
    op.create_table(
        'inquiries',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('type', sa.String(32), nullable=False),
        sa.Column('subject', sa.String(180), nullable=False),
        sa.Column('status', sa.String(32), nullable=False),
        sa.Column('priority', sa.String(32), nullable=False),
        sa.Column('department_id', sa.Uuid(), nullable=False),
        sa.Column('created_by_user_id', sa.Uuid(), nullable=False),
        sa.Column('assigned_to_staff_id', sa.Uuid(), nullable=True),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.ForeignKeyConstraint(['department_id'], ['departments.id'], name='fk_inquiries_department_id_departments', ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['created_by_user_id'], ['users.id'], name='fk_inquiries_created_by_user_id_users', ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['assigned_to_staff_id'], ['staff_profiles.id'], name='fk_inquiries_assigned_to_staff_id_staff_profiles', ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id', name='pk_inquiries'),
    )
    op.create_index('idx_inquiries_department_status', 'inquiries', ['department_id', 'status'])
    op.create_index('idx_inquiries_creator', 'inquiries', ['created_by_user_id', 'updated_at'])
    op.create_index('idx_inquiries_assignee', 'inquiries', ['assigned_to_staff_id', 'status'])

    op.create_table(
        'inquiry_messages',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('inquiry_id', sa.Uuid(), nullable=False),
        sa.Column('sender_id', sa.Uuid(), nullable=False),
        sa.Column('sender_type', sa.String(32), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        _timestamp('created_at'),
        sa.ForeignKeyConstraint(['inquiry_id'], ['inquiries.id'], name='fk_inquiry_messages_inquiry_id_inquiries', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['sender_id'], ['users.id'], name='fk_inquiry_messages_sender_id_users', ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id', name='pk_inquiry_messages'),
    )
    op.create_index('idx_inquiry_messages_inquiry', 'inquiry_messages', ['inquiry_id', 'created_at'])

    op.create_table(
        'inquiry_internal_notes',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('inquiry_id', sa.Uuid(), nullable=False),
        sa.Column('staff_id', sa.Uuid(), nullable=True),
        sa.Column('author_user_id', sa.Uuid(), nullable=False),
        sa.Column('note', sa.Text(), nullable=False),
        _timestamp('created_at'),
        sa.ForeignKeyConstraint(['inquiry_id'], ['inquiries.id'], name='fk_inquiry_internal_notes_inquiry_id_inquiries', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['staff_id'], ['staff_profiles.id'], name='fk_inquiry_internal_notes_staff_id_staff_profiles', ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['author_user_id'], ['users.id'], name='fk_inquiry_internal_notes_author_user_id_users', ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id', name='pk_inquiry_internal_notes'),
    )
    op.create_index('idx_inquiry_notes_inquiry', 'inquiry_internal_notes', ['inquiry_id', 'created_at'])

    op.create_table(
        'inquiry_audits',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('inquiry_id', sa.Uuid(), nullable=False),
        sa.Column('action', sa.String(32), nullable=False),
        sa.Column('performed_by_user_id', sa.Uuid(), nullable=False),
        sa.Column('from_department_id', sa.Uuid(), nullable=True),
        sa.Column('to_department_id', sa.Uuid(), nullable=True),
        _timestamp('created_at'),
        sa.ForeignKeyConstraint(['inquiry_id'], ['inquiries.id'], name='fk_inquiry_audits_inquiry_id_inquiries', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['performed_by_user_id'], ['users.id'], name='fk_inquiry_audits_performed_by_user_id_users', ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['from_department_id'], ['departments.id'], name='fk_inquiry_audits_from_department_id_departments', ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['to_department_id'], ['departments.id'], name='fk_inquiry_audits_to_department_id_departments', ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id', name='pk_inquiry_audits'),
    )
    op.create_index('idx_inquiry_audits_inquiry', 'inquiry_audits', ['inquiry_id', 'created_at'])
    op.create_index('idx_inquiry_audits_from_department', 'inquiry_audits', ['action', 'from_department_id'])

    # ==========================================================================
    # Notifications
    # ==========================================================================
    op.create_table(
        'notifications',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('body', sa.Text(), nullable=True),
        sa.Column('link', sa.String(500), nullable=True),
        sa.Column('entity_type', sa.String(50), nullable=True),
        sa.Column('entity_id', sa.Uuid(), nullable=True),
        sa.Column('read_at', sa.DateTime(timezone=True), nullable=True),
        _timestamp('created_at'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_notifications_user_id_users', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name='pk_notifications'),
    )
    op.create_index('idx_notif_user_unread', 'notifications', ['user_id', 'read_at', 'created_at'])
    op.create_index('idx_notif_entity', 'notifications', ['entity_type', 'entity_id'])


def downgrade() -> None:
    """Drop all baseline tables."""
    for table in (
        'notifications',
        'inquiry_audits',
        'inquiry_internal_notes',
        'inquiry_messages',
        'inquiries',
        'staff_role_assignments',
        'staff_role_permissions',
        'staff_roles',
        'staff_profiles',
        'departments',
        'users',
    ):
        op.drop_table(table)

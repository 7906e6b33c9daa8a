"""Quick-reply templates for inquiry responses

Revision ID: 0002_quick_reply_templates
Revises: 0001_baseline
Create Date: 2026-10-19

Until this revision runs, template listing degrades to an empty list and
template writes report the store as unavailable.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0002_quick_reply_templates'
down_revision: Union[str, Sequence[str], None] = '0001_baseline'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'inquiry_quick_reply_templates',
        sa.Column('id', sa.String(64), nullable=False),
        sa.Column('title', sa.String(100), nullable=False),
        sa.Column('body', sa.Text(), nullable=False),
        sa.Column('type', sa.String(32), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('created_by_user_id', sa.Uuid(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(
            ['created_by_user_id'],
            ['users.id'],
            name='fk_inquiry_quick_reply_templates_created_by_user_id_users',
            ondelete='SET NULL',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_inquiry_quick_reply_templates'),
    )


def downgrade() -> None:
    op.drop_table('inquiry_quick_reply_templates')

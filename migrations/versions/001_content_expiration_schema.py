"""Content expiration schema: users, content items, and key/value metadata.

Changes:
- Create users table (content authors and editors)
- Create content_items table (posts and pages with lifecycle status)
- Create content_meta table (per-item key/value store holding
  content_expiration and content_expiration_notified)

Revision ID: 001_content_expiration_schema
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_content_expiration_schema'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create expiration tables."""

    # -------------------------------------------------------------------------
    # 1. users
    # -------------------------------------------------------------------------
    print("  Creating users table...")

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('login', sa.String(length=64), nullable=False),
        sa.Column('display_name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=32), nullable=False, server_default='author'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('login', name='uq_users_login')
    )

    # -------------------------------------------------------------------------
    # 2. content_items
    # -------------------------------------------------------------------------
    print("  Creating content_items table...")

    op.create_table(
        'content_items',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('author_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='draft'),
        sa.Column('kind', sa.String(length=20), nullable=False, server_default='post'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['author_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_content_items_status', 'content_items', ['status'], unique=False)
    op.create_index('ix_content_items_author_id', 'content_items', ['author_id'], unique=False)

    # -------------------------------------------------------------------------
    # 3. content_meta
    # -------------------------------------------------------------------------
    print("  Creating content_meta table...")

    op.create_table(
        'content_meta',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('item_id', sa.Integer(), nullable=False),
        sa.Column('meta_key', sa.String(length=255), nullable=False),
        sa.Column('meta_value', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['item_id'], ['content_items.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('item_id', 'meta_key', name='uq_content_meta_item_key')
    )
    op.create_index('ix_content_meta_meta_key', 'content_meta', ['meta_key'], unique=False)

    print("  Created 3 tables")


def downgrade() -> None:
    """Drop expiration tables."""
    op.drop_index('ix_content_meta_meta_key', table_name='content_meta')
    op.drop_table('content_meta')
    op.drop_index('ix_content_items_author_id', table_name='content_items')
    op.drop_index('ix_content_items_status', table_name='content_items')
    op.drop_table('content_items')
    op.drop_table('users')

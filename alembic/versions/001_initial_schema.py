"""Initial schema: forum_posts.

Revision ID: 001
Revises: None
Create Date: 2026-10-19

Creates: forum_posts (roots and replies, soft delete via deleted_at)
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the forum_posts table."""

    # -- forum_posts --
    op.create_table(
        "forum_posts",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column(
            "root_id",
            sa.Integer,
            sa.ForeignKey("forum_posts.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column(
            "parent_id",
            sa.Integer,
            sa.ForeignKey("forum_posts.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column(
            "created_at",
            sa.DateTime,
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("deleted_at", sa.DateTime, nullable=True),
        sa.Column("author", sa.Text, nullable=False),
        sa.Column("message", sa.Text, nullable=False),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_forum_posts_root_id", "forum_posts", ["root_id"])


def downgrade() -> None:
    """Drop the forum_posts table."""
    op.drop_index("ix_forum_posts_root_id", table_name="forum_posts")
    op.drop_table("forum_posts")

"""create post table

Revision ID: 0001_create_post
Revises:
Create Date: 2026-10-18 09:30:00.000000

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "0001_create_post"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TAG_LIST = sa.JSON().with_variant(postgresql.ARRAY(sa.String(length=255)), "postgresql")


def upgrade() -> None:
    """Create the post table and its query indexes."""
    op.create_table(
        "post",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("author", sa.String(length=255), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("category", TAG_LIST, nullable=False),
        sa.Column("favorite", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("tags", TAG_LIST, nullable=True),
        sa.Column("excerpt", sa.String(length=255), nullable=True),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_post_author_category", "post", ["author", "category"])
    op.create_index("ix_post_date", "post", ["date"])
    op.create_index("ix_post_favorite", "post", ["favorite"])
    op.create_index("ix_post_tags", "post", ["tags"], postgresql_using="gin")


def downgrade() -> None:
    """Drop the post table."""
    op.drop_index("ix_post_tags", table_name="post")
    op.drop_index("ix_post_favorite", table_name="post")
    op.drop_index("ix_post_date", table_name="post")
    op.drop_index("ix_post_author_category", table_name="post")
    op.drop_table("post")

# src/inkwell/models/post.py
"""SQLAlchemy model for blog posts."""

import uuid
from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Index, String, Text, Uuid
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from inkwell.db.session import Base
from inkwell.db.time import utcnow

TITLE_MIN_LENGTH = 5
TITLE_MAX_LENGTH = 255
AUTHOR_MAX_LENGTH = 255
BODY_MAX_LENGTH = 5000
EXCERPT_MAX_LENGTH = 255
TAG_MAX_LENGTH = 255

# Fields an author may set through create/update.
MUTABLE_FIELDS = ("title", "author", "body", "category", "favorite", "tags", "excerpt", "date")

# Native text[] on PostgreSQL, JSON everywhere else (SQLite in tests).
TagList = JSON().with_variant(ARRAY(String(TAG_MAX_LENGTH)), "postgresql")


class Post(Base):
    """A single blog article.

    ``id`` and the two audit timestamps are owned by the server; everything
    else is supplied by the author. ``date`` is the publication date used
    for ordering and falls back to the creation time when omitted.
    """

    __tablename__ = "post"
    __table_args__ = (
        Index("ix_post_author_category", "author", "category"),
        Index("ix_post_date", "date"),
        Index("ix_post_favorite", "favorite"),
        Index("ix_post_tags", "tags", postgresql_using="gin"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    author: Mapped[str] = mapped_column(String(AUTHOR_MAX_LENGTH), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[list[str]] = mapped_column(TagList, nullable=False)
    favorite: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    tags: Mapped[list[str] | None] = mapped_column(TagList, nullable=True)
    excerpt: Mapped[str | None] = mapped_column(String(EXCERPT_MAX_LENGTH), nullable=True)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

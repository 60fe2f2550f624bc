"""Data access helpers for working with posts."""
from __future__ import annotations

import uuid
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from sqlalchemy import ColumnElement, String, column, func, literal, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from inkwell.core.errors import StorageError
from inkwell.db.time import utcnow
from inkwell.models.post import Post
from inkwell.schemas.common import Pagination
from inkwell.schemas.post import PostCreate, PostUpdate
from inkwell.services.validation import validate_create, validate_update

__all__ = ["PostRepository", "category_contains", "utc_date_text"]

T = TypeVar("T")

# Newest publication date first; ties fall back to insertion order, then id.
NEWEST_FIRST = (Post.date.desc(), Post.created_at.desc(), Post.id.desc())


def category_contains(dialect: str, query: str) -> ColumnElement[bool]:
    """Return a clause true when any single category tag contains ``query``.

    Tags are unnested so a match never spans two tags or the list syntax.
    """
    if dialect == "postgresql":
        tags = (
            func.unnest(Post.category)
            .table_valued(column("tag", String))
            .render_derived(name="tags")
        )
        tag = tags.c.tag
    else:
        tags = func.json_each(Post.category).table_valued(column("value", String))
        tag = tags.c.value
    return (
        select(literal(1))
        .select_from(tags)
        .where(tag.icontains(query, autoescape=True))
        .exists()
    )


def utc_date_text(dialect: str) -> ColumnElement[str]:
    """Render ``Post.date`` as ``YYYY-MM-DD HH:MM:SS`` in UTC."""
    if dialect == "postgresql":
        # A plain cast would follow the session TimeZone.
        return func.to_char(func.timezone("UTC", Post.date), "YYYY-MM-DD HH24:MI:SS")
    # SQLite stores the UTC value as ISO text without an offset.
    return func.strftime("%Y-%m-%d %H:%M:%S", Post.date)


class PostRepository:
    """Persistence operations for posts against a request-scoped session.

    Every operation either completes or leaves the store untouched: writes
    are committed individually and rolled back on failure. Database
    failures surface as :class:`StorageError`; a missing row is reported by
    returning ``None`` or ``False`` rather than raising.
    """

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def _run(self, action: str, operation: Callable[[], T]) -> T:
        try:
            return operation()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StorageError(f"Storage failure while {action}") from exc

    def create(self, fields: PostCreate | Mapping[str, Any]) -> Post:
        """Insert a new post and return the persisted ORM instance.

        Args:
            fields: Validated create schema or a raw payload to validate

        Raises:
            ValidationError: If a raw payload violates the post constraints
            StorageError: If the insert fails
        """
        data = fields if isinstance(fields, PostCreate) else validate_create(fields)
        values = data.model_dump()
        if values.get("date") is None:
            values.pop("date", None)

        def _insert() -> Post:
            post = Post(**values)
            self.session.add(post)
            self.session.commit()
            self.session.refresh(post)
            return post

        return self._run("creating post", _insert)

    def get_by_id(self, post_id: uuid.UUID) -> Post | None:
        """Return a post by identifier, or ``None`` if it does not exist."""
        return self._run("fetching post", lambda: self.session.get(Post, post_id))

    def get_all(self) -> list[Post]:
        """Return every post, newest first."""
        stmt = select(Post).order_by(*NEWEST_FIRST)
        return self._run("fetching posts", lambda: list(self.session.scalars(stmt)))

    def get_paginated(self, page: int, limit: int) -> tuple[list[Post], Pagination]:
        """Return one page of posts, newest first, with pagination metadata."""
        pagination = Pagination.build(total=self.count(), page=page, limit=limit)
        stmt = (
            select(Post)
            .order_by(*NEWEST_FIRST)
            .offset(pagination.offset)
            .limit(pagination.limit)
        )
        posts = self._run("fetching paginated posts", lambda: list(self.session.scalars(stmt)))
        return posts, pagination

    def count(self) -> int:
        """Return the number of stored posts."""
        stmt = select(func.count()).select_from(Post)
        return self._run("counting posts", lambda: int(self.session.scalar(stmt) or 0))

    def get_recent(self, limit: int = 5) -> list[Post]:
        """Return the ``limit`` most recent posts by publication date."""
        stmt = select(Post).order_by(*NEWEST_FIRST).limit(limit)
        return self._run("fetching recent posts", lambda: list(self.session.scalars(stmt)))

    def search(self, query: str) -> list[Post]:
        """Return posts whose title, category or date contain ``query``.

        Matching is a case-insensitive substring test. Each category tag is
        matched on its own, and ``date`` against its UTC rendering
        ``YYYY-MM-DD HH:MM:SS``, so date queries should use that layout
        (``2024-01`` or ``2024-01-15``).
        """
        dialect = self.session.get_bind().dialect.name
        stmt = (
            select(Post)
            .where(
                or_(
                    Post.title.icontains(query, autoescape=True),
                    category_contains(dialect, query),
                    utc_date_text(dialect).icontains(query, autoescape=True),
                )
            )
            .order_by(*NEWEST_FIRST)
        )
        return self._run("searching posts", lambda: list(self.session.scalars(stmt)))

    def update(self, post_id: uuid.UUID, fields: PostUpdate | Mapping[str, Any]) -> Post | None:
        """Apply the supplied fields to a post.

        Only fields present in ``fields`` change; ``id`` and ``created_at``
        are never touched and ``updated_at`` refreshes automatically.

        Returns:
            The updated post, or ``None`` if ``post_id`` does not resolve
        """
        data = fields if isinstance(fields, PostUpdate) else validate_update(fields)
        changes = data.changes()

        def _apply() -> Post | None:
            post = self.session.get(Post, post_id)
            if post is None:
                return None
            for name, value in changes.items():
                setattr(post, name, value)
            post.updated_at = utcnow()
            self.session.commit()
            self.session.refresh(post)
            return post

        return self._run("updating post", _apply)

    def delete(self, post_id: uuid.UUID) -> bool:
        """Permanently remove a post.

        Returns:
            True if a post was deleted, False if none matched ``post_id``
        """

        def _delete() -> bool:
            post = self.session.get(Post, post_id)
            if post is None:
                return False
            self.session.delete(post)
            self.session.commit()
            return True

        return self._run("deleting post", _delete)

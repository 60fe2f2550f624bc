# src/inkwell/schemas/post.py
"""Post-related Pydantic schemas.

These models hold the declarative constraints for client input. They are
applied by :mod:`inkwell.services.validation`, which turns their failures
into a single aggregated ``ValidationError``.
"""

from datetime import date, datetime
from typing import Annotated, Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator

from inkwell.db.time import as_utc
from inkwell.models.post import (
    AUTHOR_MAX_LENGTH,
    BODY_MAX_LENGTH,
    EXCERPT_MAX_LENGTH,
    TAG_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    TITLE_MIN_LENGTH,
)


def coerce_tag_list(value: Any) -> Any:
    """Accept a single tag or a sequence of tags uniformly.

    A bare string becomes a one-element list; anything else is handed to
    the list validator unchanged so that bad shapes still fail.
    """
    if isinstance(value, str):
        return [value]
    if isinstance(value, tuple):
        return list(value)
    return value


def parse_post_date(value: Any) -> Any:
    """Parse a client-supplied publication date.

    ISO-8601 dates and datetimes are accepted; naive values are taken as UTC.
    Anything unparseable raises ``ValueError`` rather than being defaulted.
    """
    if value is None or isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError as err:
            raise ValueError("must be a valid date") from err
    else:
        raise ValueError("must be a valid date")

    return None if parsed is None else as_utc(parsed)


TagStr = Annotated[str, StringConstraints(min_length=1, max_length=TAG_MAX_LENGTH)]

# Supplying null for these on update would erase a required value.
NON_NULLABLE_FIELDS = frozenset({"title", "author", "body", "category", "favorite", "date"})


class _PostFields(BaseModel):
    """Shared normalisation for create and update payloads."""

    model_config = ConfigDict(extra="forbid")

    @field_validator("category", "tags", mode="before", check_fields=False)
    @classmethod
    def _coerce_tags(cls, value: Any) -> Any:
        return coerce_tag_list(value)

    @field_validator("date", mode="before", check_fields=False)
    @classmethod
    def _parse_date(cls, value: Any) -> Any:
        return parse_post_date(value)

    @field_validator("title", "author", check_fields=False)
    @classmethod
    def _not_blank(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("category", "tags", check_fields=False)
    @classmethod
    def _no_blank_tags(cls, value: list[str] | None) -> list[str] | None:
        if value is not None and any(not tag.strip() for tag in value):
            raise ValueError("tags must not be blank")
        return value


class PostCreate(_PostFields):
    """Schema for creating a new post."""

    title: str = Field(..., min_length=TITLE_MIN_LENGTH, max_length=TITLE_MAX_LENGTH)
    author: str = Field(..., min_length=1, max_length=AUTHOR_MAX_LENGTH)
    body: str = Field(..., max_length=BODY_MAX_LENGTH)
    category: list[TagStr] = Field(..., min_length=1)
    favorite: bool = False
    tags: list[TagStr] = Field(default_factory=list)
    excerpt: str | None = Field(None, max_length=EXCERPT_MAX_LENGTH)
    date: datetime | None = Field(None, description="Publication date; defaults to now")

    @field_validator("favorite", mode="before")
    @classmethod
    def _default_favorite(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("tags", mode="before")
    @classmethod
    def _default_tags(cls, value: Any) -> Any:
        return [] if value is None else coerce_tag_list(value)


class PostUpdate(_PostFields):
    """Schema for a partial update; only supplied fields are applied."""

    title: str | None = Field(None, min_length=TITLE_MIN_LENGTH, max_length=TITLE_MAX_LENGTH)
    author: str | None = Field(None, min_length=1, max_length=AUTHOR_MAX_LENGTH)
    body: str | None = Field(None, max_length=BODY_MAX_LENGTH)
    category: list[TagStr] | None = Field(None, min_length=1)
    favorite: bool | None = None
    tags: list[TagStr] | None = None
    excerpt: str | None = Field(None, max_length=EXCERPT_MAX_LENGTH)
    date: datetime | None = None

    def changes(self) -> dict[str, Any]:
        """Return only the fields the client actually supplied."""
        return self.model_dump(exclude_unset=True)


class PostRead(BaseModel):
    """Schema for post information returned by the API."""

    id: UUID
    title: str
    author: str
    body: str
    category: list[str]
    favorite: bool
    tags: list[str]
    excerpt: str | None
    date: datetime
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")

    model_config = ConfigDict(from_attributes=True)

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_default(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("date", "created_at", "updated_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    def to_json(self) -> dict[str, Any]:
        """Serialize with API field names and JSON-compatible values."""
        return self.model_dump(mode="json", by_alias=True)

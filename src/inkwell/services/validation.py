"""Validation boundary for client-supplied post input.

Every function here either returns normalized values or raises a single
:class:`~inkwell.core.errors.ValidationError` describing all problems found.
Nothing reaches the repository without passing through this module.
"""
from __future__ import annotations

import uuid
from collections.abc import Mapping
from typing import Any

import pydantic

from inkwell.core.errors import ValidationError
from inkwell.schemas.post import NON_NULLABLE_FIELDS, PostCreate, PostUpdate

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


def _field_errors(exc: pydantic.ValidationError) -> list[dict[str, Any]]:
    errors: list[dict[str, Any]] = []
    for error in exc.errors():
        loc = error.get("loc") or ()
        # Keep the field name only; list indices are noise for clients.
        field = next((str(part) for part in loc if isinstance(part, str)), "payload")
        reason = error.get("msg", "invalid value")
        if error.get("type") == "extra_forbidden":
            reason = "field is not writable"
        errors.append({"field": field, "reason": reason})
    return errors


def _require_mapping(payload: Any) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise ValidationError.for_field("payload", "request body must be a JSON object")
    return payload


def validate_create(payload: Any) -> PostCreate:
    """Validate a create payload.

    Args:
        payload: Decoded JSON body supplied by the client

    Returns:
        Normalized create schema (``category`` always a list)

    Raises:
        ValidationError: With every offending field when the payload is invalid
    """
    data = _require_mapping(payload)
    try:
        return PostCreate.model_validate(dict(data))
    except pydantic.ValidationError as exc:
        raise ValidationError("Invalid post data.", errors=_field_errors(exc)) from exc


def validate_update(payload: Any) -> PostUpdate:
    """Validate a partial update payload.

    Explicit nulls for required fields are rejected alongside any constraint
    violations so the client sees every problem at once.
    """
    data = _require_mapping(payload)
    errors = [
        {"field": name, "reason": "must not be null"}
        for name in sorted(NON_NULLABLE_FIELDS)
        if name in data and data[name] is None
    ]
    update: PostUpdate | None = None
    try:
        update = PostUpdate.model_validate(dict(data))
    except pydantic.ValidationError as exc:
        errors.extend(_field_errors(exc))
    if errors or update is None:
        raise ValidationError("Invalid post data.", errors=errors)
    return update


def parse_post_id(raw: Any) -> uuid.UUID:
    """Parse a path identifier, distinguishing malformed ids from missing posts."""
    if isinstance(raw, uuid.UUID):
        return raw
    try:
        return uuid.UUID(str(raw))
    except (TypeError, ValueError) as err:
        raise ValidationError.for_field("id", "Invalid post ID format.") from err


def _positive_int(raw: Any, default: int) -> int:
    if raw is None:
        return default
    try:
        value = int(str(raw).strip())
    except ValueError:
        return default
    return value if value >= 1 else default


def parse_pagination(
    page: Any,
    limit: Any,
    *,
    default_limit: int = DEFAULT_LIMIT,
    max_limit: int | None = None,
) -> tuple[int, int]:
    """Normalize pagination query values.

    Missing, non-numeric or non-positive values fall back to the defaults;
    ``limit`` is clamped to ``max_limit`` when one is given.
    """
    page_value = _positive_int(page, DEFAULT_PAGE)
    limit_value = _positive_int(limit, default_limit)
    if max_limit is not None:
        limit_value = min(limit_value, max_limit)
    return page_value, limit_value


def require_search_query(query: str | None) -> str:
    """Return the search term, failing before any storage access if absent."""
    if query is None or not query.strip():
        raise ValidationError.for_field(
            "query", "Query parameter is required for searching posts."
        )
    return query.strip()


__all__ = [
    "parse_pagination",
    "parse_post_id",
    "require_search_query",
    "validate_create",
    "validate_update",
]

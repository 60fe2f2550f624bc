"""Uniform response envelope for the posts API.

Every response has the shape ``{success, message, data?, pagination?}``;
failures add a stable ``error`` code and, for validation failures, the
list of offending fields. Internal exception text never appears here.
"""
from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from fastapi import status
from fastapi.responses import JSONResponse

from inkwell.models.post import Post
from inkwell.schemas.common import Pagination
from inkwell.schemas.post import PostRead


def serialize_post(post: Post) -> dict[str, Any]:
    """Return the API representation of a post."""
    return PostRead.model_validate(post).to_json()


def serialize_posts(posts: Iterable[Post]) -> list[dict[str, Any]]:
    """Return the API representation of several posts, preserving order."""
    return [serialize_post(post) for post in posts]


def success_response(
    message: str,
    data: Any = None,
    *,
    pagination: Pagination | None = None,
    status_code: int = status.HTTP_200_OK,
    include_data: bool = True,
) -> JSONResponse:
    """Build a successful envelope."""
    content: dict[str, Any] = {"success": True, "message": message}
    if include_data:
        content["data"] = data
    if pagination is not None:
        content["pagination"] = pagination.to_json()
    return JSONResponse(status_code=status_code, content=content)


def error_response(
    status_code: int,
    message: str,
    error: str,
    errors: list[dict[str, Any]] | None = None,
) -> JSONResponse:
    """Build a failure envelope carrying a coarse error code."""
    content: dict[str, Any] = {"success": False, "message": message, "error": error}
    if errors:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=content)

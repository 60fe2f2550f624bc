# src/inkwell/api/v1/endpoints/posts.py
"""Post endpoints for the Inkwell API.

Literal sub-paths (``/count``, ``/recent``, ``/search``) are registered
before ``/{post_id}``; Starlette matches routes in registration order, so
moving them below would make those segments parse as post identifiers.
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Query, status
from fastapi.responses import JSONResponse

from inkwell.api.envelope import (
    error_response,
    serialize_post,
    serialize_posts,
    success_response,
)
from inkwell.api.v1.dependencies import IdentityDep, PostRepositoryDep
from inkwell.core.errors import NotFoundError, StorageError, ValidationError
from inkwell.core.settings import settings
from inkwell.services.validation import (
    parse_pagination,
    parse_post_id,
    require_search_query,
    validate_create,
    validate_update,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["posts"])

NOT_FOUND_MESSAGE = "No post with that ID was found."


def _invalid(exc: ValidationError, message: str | None = None) -> JSONResponse:
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        message or exc.message,
        exc.code,
        errors=exc.errors,
    )


def _not_found(message: str = NOT_FOUND_MESSAGE) -> JSONResponse:
    logger.info(message)
    return error_response(status.HTTP_404_NOT_FOUND, message, NotFoundError.code)


def _storage_failure(exc: StorageError, message: str) -> JSONResponse:
    logger.error("%s %s", message, exc, exc_info=exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, message, exc.code)


@router.get("/count")
def get_post_count(repo: PostRepositoryDep) -> JSONResponse:
    """Return the total number of posts."""
    try:
        total = repo.count()
    except StorageError as exc:
        return _storage_failure(exc, "Error fetching post count.")
    return success_response("Post count", data=total)


@router.get("/recent")
def get_recent_posts(repo: PostRepositoryDep) -> JSONResponse:
    """Return the most recent posts; an empty store is reported as 404."""
    try:
        posts = repo.get_recent(settings.recent_posts_limit)
    except StorageError as exc:
        return _storage_failure(exc, "Error fetching recent posts.")
    if not posts:
        return _not_found("No recent posts found.")
    return success_response("Successfully fetched recent posts.", data=serialize_posts(posts))


@router.get("/search")
def search_posts(
    repo: PostRepositoryDep,
    query: Annotated[str | None, Query(description="Case-insensitive substring")] = None,
) -> JSONResponse:
    """Search posts by title, category or date.

    Args:
        repo: Post repository
        query: Term matched as a case-insensitive substring

    Returns:
        200 with matches, 400 when ``query`` is missing, 404 when nothing matches
    """
    try:
        term = require_search_query(query)
    except ValidationError as exc:
        logger.info("Rejected search without query")
        return _invalid(exc)

    try:
        posts = repo.search(term)
    except StorageError as exc:
        return _storage_failure(exc, "Error searching posts.")
    if not posts:
        return _not_found("No posts found matching your search query.")
    return success_response("Search results", data=serialize_posts(posts))


@router.get("/{post_id}")
def get_post(post_id: str, repo: PostRepositoryDep) -> JSONResponse:
    """Return a single post by identifier."""
    try:
        parsed_id = parse_post_id(post_id)
    except ValidationError as exc:
        logger.info("Rejected malformed post id %r", post_id)
        return _invalid(exc)

    try:
        post = repo.get_by_id(parsed_id)
    except StorageError as exc:
        return _storage_failure(exc, "Error fetching post.")
    if post is None:
        return _not_found()
    return success_response("Successfully fetched post.", data=serialize_post(post))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_post(
    repo: PostRepositoryDep,
    identity: IdentityDep,
    payload: Annotated[Any, Body()],
) -> JSONResponse:
    """Create a new post.

    ``category`` may be given as a single tag or a list of tags; it is
    always stored and returned as a list.
    """
    try:
        fields = validate_create(payload)
    except ValidationError as exc:
        logger.warning("Error creating post: %s %s", exc.message, exc.errors)
        return _invalid(exc, "Error creating post.")

    try:
        post = repo.create(fields)
    except StorageError as exc:
        logger.error("Error creating post: %s", exc, exc_info=exc)
        return error_response(status.HTTP_400_BAD_REQUEST, "Error creating post.", exc.code)

    if identity is not None:
        logger.info("Post %s created by %s", post.id, identity.uid)
    return success_response(
        "Successfully created a new post.",
        data=serialize_post(post),
        status_code=status.HTTP_201_CREATED,
    )


@router.get("")
def list_posts(
    repo: PostRepositoryDep,
    page: Annotated[str | None, Query(description="1-based page number")] = None,
    limit: Annotated[str | None, Query(description="Posts per page")] = None,
) -> JSONResponse:
    """List posts newest first.

    Without ``page`` or ``limit`` every post is returned; with either one
    the response is paginated and carries ``pagination`` metadata.
    """
    if page is None and limit is None:
        try:
            posts = repo.get_all()
        except StorageError as exc:
            return _storage_failure(exc, "Error fetching posts.")
        if not posts:
            return success_response("No posts found.", data=[])
        return success_response("Successfully fetched all posts.", data=serialize_posts(posts))

    page_number, page_size = parse_pagination(
        page,
        limit,
        default_limit=settings.pagination_default_limit,
        max_limit=settings.pagination_max_limit,
    )
    try:
        posts, pagination = repo.get_paginated(page_number, page_size)
    except StorageError as exc:
        return _storage_failure(exc, "Error fetching posts.")
    return success_response(
        "Successfully fetched posts.",
        data=serialize_posts(posts),
        pagination=pagination,
    )


@router.patch("/{post_id}")
def update_post(
    post_id: str,
    repo: PostRepositoryDep,
    identity: IdentityDep,
    payload: Annotated[Any, Body()],
) -> JSONResponse:
    """Apply a partial update to a post."""
    try:
        parsed_id = parse_post_id(post_id)
        changes = validate_update(payload)
    except ValidationError as exc:
        logger.warning("Error updating post %s: %s %s", post_id, exc.message, exc.errors)
        return _invalid(exc, "Error updating post.")

    try:
        post = repo.update(parsed_id, changes)
    except StorageError as exc:
        return _storage_failure(exc, "Error updating post.")
    if post is None:
        return _not_found()
    return success_response("Successfully updated post.", data=serialize_post(post))


@router.delete("/{post_id}")
def delete_post(post_id: str, repo: PostRepositoryDep, identity: IdentityDep) -> JSONResponse:
    """Permanently delete a post."""
    try:
        parsed_id = parse_post_id(post_id)
    except ValidationError as exc:
        logger.info("Rejected malformed post id %r", post_id)
        return _invalid(exc)

    try:
        deleted = repo.delete(parsed_id)
    except StorageError as exc:
        return _storage_failure(exc, "Error deleting post.")
    if not deleted:
        return _not_found()
    return success_response("Post deleted successfully.", include_data=False)

"""Shared API dependencies for authentication and data access."""

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from inkwell.core.errors import AuthError
from inkwell.core.security import Identity, verify_identity_token
from inkwell.core.settings import settings
from inkwell.db.session import get_db
from inkwell.repositories.post_repo import PostRepository
from inkwell.services.blob_storage import BlobStorage, get_blob_storage

logger = logging.getLogger(__name__)

# HTTP Bearer scheme; a missing header is reported by require_identity itself.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_post_repository(db: SessionDep) -> PostRepository:
    """Return a post repository bound to the request session."""
    return PostRepository(db)


def require_identity(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> Identity | None:
    """Resolve the caller identity when authentication is enabled.

    Args:
        credentials: Bearer credentials parsed from the Authorization header

    Returns:
        The verified identity, or None when ``AUTH_REQUIRED`` is off

    Raises:
        HTTPException: 401 if the header is missing, 403 if the token is invalid
    """
    if not settings.auth_required:
        return None
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header missing",
        )
    try:
        return verify_identity_token(credentials.credentials)
    except AuthError as err:
        logger.warning("Rejected identity token: %s", err)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or expired token",
        ) from err


PostRepositoryDep = Annotated[PostRepository, Depends(get_post_repository)]
IdentityDep = Annotated[Identity | None, Depends(require_identity)]
BlobStorageDep = Annotated[BlobStorage, Depends(get_blob_storage)]

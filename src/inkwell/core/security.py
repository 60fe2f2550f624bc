"""Identity token issuance and verification."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

from jose import JWTError, jwt

from inkwell.core.errors import AuthError
from inkwell.core.settings import settings
from inkwell.db.time import utcnow


@dataclass(frozen=True)
class Identity:
    """A verified caller identity attached to a request."""

    uid: str
    claims: dict[str, Any] = field(default_factory=dict)


def create_identity_token(uid: str, expires_minutes: int | None = None) -> str:
    """Issue a signed identity token for ``uid``.

    Used by tooling and tests; production tokens come from the identity
    provider sharing ``SECRET_KEY``.
    """
    minutes = expires_minutes if expires_minutes is not None else settings.access_token_expire_minutes
    claims: dict[str, Any] = {"sub": uid, "exp": utcnow() + timedelta(minutes=minutes)}
    if settings.jwt_audience:
        claims["aud"] = settings.jwt_audience
    return jwt.encode(claims, settings.secret_key, algorithm=settings.jwt_algorithm)


def verify_identity_token(token: str) -> Identity:
    """Verify a bearer token and return the identity it carries.

    Args:
        token: Encoded JWT taken from the Authorization header

    Returns:
        Identity with the token subject as ``uid``

    Raises:
        AuthError: If the token is malformed, expired, or has no subject
    """
    try:
        claims = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options={"verify_aud": settings.jwt_audience is not None},
        )
    except JWTError as err:
        raise AuthError("Invalid or expired token") from err

    subject = claims.get("sub")
    if not subject:
        raise AuthError("Token has no subject")
    return Identity(uid=str(subject), claims=claims)

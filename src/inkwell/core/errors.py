"""Error taxonomy shared by the post subsystem.

Each error carries a stable ``code`` that is safe to show to clients; the
human-readable detail of the underlying failure is only ever logged.
"""
from __future__ import annotations

from typing import Any


class InkwellError(Exception):
    """Base class for all application errors."""

    code = "internal_error"

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class ValidationError(InkwellError):
    """Client input is malformed or violates a post constraint.

    All offending fields are aggregated into ``errors`` so that a single
    failure describes every problem with the payload.
    """

    code = "validation_error"

    def __init__(
        self,
        message: str = "Validation failed.",
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(message)
        self.errors = errors or []

    @classmethod
    def for_field(cls, field: str, reason: str) -> ValidationError:
        """Build an error describing a single offending field."""
        return cls(reason, errors=[{"field": field, "reason": reason}])


class NotFoundError(InkwellError):
    """The target of an operation does not exist."""

    code = "not_found"


class StorageError(InkwellError):
    """Connection, constraint or query failure at the persistence layer."""

    code = "storage_error"


class SchemaVersionError(StorageError):
    """The live database schema does not match the expected revision."""

    code = "schema_mismatch"


class AuthError(InkwellError):
    """Identity verification failed."""

    code = "auth_error"


class UploadError(InkwellError):
    """A binary upload was rejected before reaching blob storage."""

    def __init__(self, code: str, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.code = code
        self.status_code = status_code


__all__ = [
    "AuthError",
    "InkwellError",
    "NotFoundError",
    "SchemaVersionError",
    "StorageError",
    "UploadError",
    "ValidationError",
]

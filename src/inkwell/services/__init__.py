# src/inkwell/services/__init__.py
"""Business logic services for the Inkwell application."""

from .blob_storage import BlobStorage, LocalBlobStorage, get_blob_storage

__all__ = [
    "BlobStorage",
    "LocalBlobStorage",
    "get_blob_storage",
]

"""Blob storage sinks for post images.

The service only needs "accept a buffer, return a reference"; anything that
satisfies :class:`BlobStorage` can be plugged in through
:func:`get_blob_storage`.
"""
from __future__ import annotations

import logging
import uuid
from functools import lru_cache
from pathlib import Path
from typing import Protocol

from inkwell.core.errors import StorageError
from inkwell.core.settings import settings

logger = logging.getLogger(__name__)

# Extensions for the common image types; others fall back to the upload name.
IMAGE_EXTENSIONS = {
    "image/gif": ".gif",
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/svg+xml": ".svg",
    "image/webp": ".webp",
}


class BlobStorage(Protocol):
    """Opaque sink for binary assets."""

    def put(self, data: bytes, content_type: str, filename: str | None = None) -> str:
        """Store ``data`` and return a reference to it.

        ``filename`` is the client's name for the asset; sinks may use it
        as a hint but never as the stored name.
        """
        ...


class LocalBlobStorage:
    """Store blobs as files under a local directory."""

    def __init__(self, root: Path | str, url_prefix: str = "/uploads") -> None:
        self.root = Path(root)
        self.url_prefix = url_prefix.rstrip("/")

    def put(self, data: bytes, content_type: str, filename: str | None = None) -> str:
        extension = IMAGE_EXTENSIONS.get(content_type)
        if extension is None:
            extension = Path(filename).suffix.lower() if filename else ""
        name = uuid.uuid4().hex + extension
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            (self.root / name).write_bytes(data)
        except OSError as exc:
            raise StorageError("Unable to store blob") from exc
        logger.info("Stored blob %s (%d bytes)", name, len(data))
        return f"{self.url_prefix}/{name}"


@lru_cache(maxsize=1)
def get_blob_storage() -> BlobStorage:
    """Return the configured blob storage sink."""
    return LocalBlobStorage(settings.upload_dir, settings.upload_url_prefix)

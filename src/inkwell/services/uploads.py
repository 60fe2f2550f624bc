"""Validation and storage of uploaded images."""
from __future__ import annotations

from dataclasses import dataclass

from fastapi import UploadFile, status

from inkwell.core.errors import UploadError
from inkwell.services.blob_storage import BlobStorage

INVALID_FILE_TYPE = "INVALID_FILE_TYPE"
LIMIT_FILE_SIZE = "LIMIT_FILE_SIZE"


@dataclass(frozen=True)
class StoredImage:
    """Reference to an image accepted into blob storage."""

    reference: str
    content_type: str
    size: int


def validate_image_upload(content_type: str | None, size: int, max_size: int) -> None:
    """Reject anything that is not an image within the size limit.

    Raises:
        UploadError: ``INVALID_FILE_TYPE`` (400) for non-image content,
            ``LIMIT_FILE_SIZE`` (413) when ``size`` exceeds ``max_size``
    """
    if not content_type or not content_type.startswith("image/"):
        raise UploadError(INVALID_FILE_TYPE, "Only image files are allowed.")
    if size > max_size:
        raise UploadError(
            LIMIT_FILE_SIZE,
            f"File too large; the limit is {max_size} bytes.",
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        )


async def store_image(upload: UploadFile, storage: BlobStorage, max_size: int) -> StoredImage:
    """Validate an uploaded image and hand it to blob storage.

    At most ``max_size + 1`` bytes are read so oversized uploads are
    rejected without buffering them whole.
    """
    content_type = upload.content_type or ""
    validate_image_upload(content_type, 0, max_size)
    data = await upload.read(max_size + 1)
    validate_image_upload(content_type, len(data), max_size)
    reference = storage.put(data, content_type, upload.filename)
    return StoredImage(reference=reference, content_type=content_type, size=len(data))

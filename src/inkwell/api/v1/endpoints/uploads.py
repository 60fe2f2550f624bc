"""Image upload endpoint backed by blob storage."""

import logging

from fastapi import APIRouter, File, UploadFile, status
from fastapi.responses import JSONResponse

from inkwell.api.envelope import error_response, success_response
from inkwell.api.v1.dependencies import BlobStorageDep, IdentityDep
from inkwell.core.errors import StorageError, UploadError
from inkwell.core.settings import settings
from inkwell.services.uploads import store_image

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/uploads", tags=["uploads"])


@router.post("/images", status_code=status.HTTP_201_CREATED)
async def upload_image(
    storage: BlobStorageDep,
    identity: IdentityDep,
    file: UploadFile = File(...),
) -> JSONResponse:
    """Accept an image for a post and return its blob reference.

    Returns:
        201 with ``{reference, contentType, size}``; 400 for non-image
        content, 413 when the file exceeds ``MAX_FILE_SIZE``
    """
    try:
        stored = await store_image(file, storage, settings.max_file_size)
    except UploadError as exc:
        logger.warning("Rejected upload %r: %s", file.filename, exc.message)
        return error_response(exc.status_code, exc.message, exc.code)
    except StorageError as exc:
        logger.error("Error storing upload %r: %s", file.filename, exc, exc_info=exc)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Error storing upload.", exc.code
        )
    finally:
        await file.close()

    return success_response(
        "Successfully uploaded image.",
        data={
            "reference": stored.reference,
            "contentType": stored.content_type,
            "size": stored.size,
        },
        status_code=status.HTTP_201_CREATED,
    )

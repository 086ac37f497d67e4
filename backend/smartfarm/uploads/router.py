"""FastAPI router for image upload endpoints.

Endpoints (all require a bearer token):
    POST   /api/upload/image   - Upload one image (multipart: file, folder)
    POST   /api/upload/images  - Upload up to 10 images (multipart: files, folder)
    POST   /api/upload/base64  - Upload a data-URI image (JSON: image, folder)
    DELETE /api/upload         - Delete a stored image (JSON: url)
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile

from smartfarm.auth.dependencies import get_current_user
from smartfarm.auth.service import CurrentUser

from .schemas import (
    Base64UploadRequest,
    DeleteRequest,
    DeleteResponse,
    RejectReason,
    UploadedFile,
    UploadResult,
)
from .service import UploadService
from .validation import UploadValidationError

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/upload",
    tags=["upload"],
    dependencies=[Depends(get_current_user)],
)

_STATUS_BY_REASON = {
    RejectReason.UNSUPPORTED_TYPE: 415,
    RejectReason.TOO_LARGE: 413,
    RejectReason.TOO_MANY_FILES: 413,
    RejectReason.MALFORMED_DATA_URI: 400,
    RejectReason.INVALID_FOLDER: 400,
    RejectReason.NO_FILE: 400,
}


def get_upload_service(request: Request) -> UploadService:
    """Return the service created at startup (overridden in tests)."""
    return request.app.state.upload_service


def _http_error(e: UploadValidationError) -> HTTPException:
    return HTTPException(status_code=_STATUS_BY_REASON.get(e.reason, 400), detail=e.message)


async def _to_uploaded_file(file: UploadFile, fieldname: str) -> UploadedFile:
    content = await file.read()
    return UploadedFile(
        fieldname=fieldname,
        originalname=file.filename or "unnamed",
        mimetype=file.content_type or "application/octet-stream",
        buffer=content,
        size=len(content),
    )


@router.post("/image", response_model=UploadResult)
async def upload_image(
    file: UploadFile = File(...),
    folder: Optional[str] = Form(None),
    service: UploadService = Depends(get_upload_service),
    user: CurrentUser = Depends(get_current_user),
):
    """Upload a single image.

    Supported types: JPEG, PNG, GIF, WebP, up to 5MB.

    Raises:
        HTTPException 415: Unsupported file type
        HTTPException 413: File exceeds the size limit
        HTTPException 400: Folder not allowed
        HTTPException 500: If the write fails
    """
    try:
        uploaded = await _to_uploaded_file(file, "file")
        result = service.upload_one(uploaded, folder)
        logger.info(f"Image uploaded by {user.id}: {result.originalName} -> {result.url}")
        return result
    except UploadValidationError as e:
        raise _http_error(e)
    except Exception as e:
        logger.error(f"Image upload failed: {e}")
        raise HTTPException(status_code=500, detail=f"Upload failed: {str(e)}")


@router.post("/images", response_model=List[UploadResult])
async def upload_images(
    files: List[UploadFile] = File(...),
    folder: Optional[str] = Form(None),
    service: UploadService = Depends(get_upload_service),
    user: CurrentUser = Depends(get_current_user),
):
    """Upload several images in one request (processed in order).

    If any image is rejected the request fails; images stored before it
    stay on disk.
    """
    try:
        uploaded = [await _to_uploaded_file(f, "files") for f in files]
        results = service.upload_many(uploaded, folder)
        logger.info(f"{len(results)} images uploaded by {user.id}")
        return results
    except UploadValidationError as e:
        raise _http_error(e)
    except Exception as e:
        logger.error(f"Multiple image upload failed: {e}")
        raise HTTPException(status_code=500, detail=f"Upload failed: {str(e)}")


@router.post("/base64", response_model=UploadResult)
async def upload_base64(
    body: Base64UploadRequest,
    service: UploadService = Depends(get_upload_service),
    user: CurrentUser = Depends(get_current_user),
):
    """Upload an image sent as ``data:image/<ext>;base64,<payload>``."""
    try:
        result = service.upload_base64(body.image, body.folder)
        logger.info(f"Base64 image uploaded by {user.id}: {result.url}")
        return result
    except UploadValidationError as e:
        raise _http_error(e)
    except Exception as e:
        logger.error(f"Base64 upload failed: {e}")
        raise HTTPException(status_code=500, detail=f"Upload failed: {str(e)}")


@router.delete("", response_model=DeleteResponse)
async def delete_file(
    body: DeleteRequest,
    service: UploadService = Depends(get_upload_service),
):
    """Delete a stored image by URL.

    A file that does not exist (or could not be removed) yields
    ``{"success": false}`` rather than an error.
    """
    return DeleteResponse(success=service.delete(body.url))

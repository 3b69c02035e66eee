from typing import Any, Optional

import structlog
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile

from golocal_spaces.dependencies import get_upload_service
from golocal_spaces.errors import MarketplaceError
from golocal_spaces.routes._helpers import success
from golocal_spaces.services.uploads import UploadService

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post("/uploads")
async def upload_file(
    file: UploadFile = File(...),
    bucket: Optional[str] = Form(None),
    service: UploadService = Depends(get_upload_service),
) -> dict[str, Any]:
    """
    Upload an image and return its public URL.

    Returns:
        dict: {"url", "path", "file_name"}
    """
    try:
        data = await file.read()
        stored = service.upload_image(file.filename, file.content_type, data, bucket=bucket)
        return success(stored)
    except (MarketplaceError, HTTPException):
        raise
    except Exception as e:
        logger.exception("upload_failed", filename=file.filename, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to upload file")


@router.delete("/uploads")
def delete_file(
    file: Optional[str] = Query(None, description="Object key returned by the upload"),
    bucket: Optional[str] = Query(None),
    service: UploadService = Depends(get_upload_service),
) -> dict[str, Any]:
    try:
        service.delete(file, bucket=bucket)
        return {"success": True, "message": "File deleted successfully"}
    except (MarketplaceError, HTTPException):
        raise
    except Exception as e:
        logger.exception("upload_delete_failed", path=file, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to delete file")

"""
Blog API — Public Storage Route
=================================

What:  Serves files from the public storage disk under /storage/.
Who:   Hit by clients following the absolute image URLs the API returns
       (<base>/storage/blogs/<file>).

Security:
    The requested path is resolved against the storage root and rejected if
    it escapes it (e.g. ../../etc/passwd).
"""

import logging

from fastapi import APIRouter
from fastapi.responses import FileResponse

from blog_api.exceptions import NotFoundError, ValidationError
from blog_api.services.image_service import PUBLIC_PREFIX, image_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Storage"])


@router.get(
    f"/{PUBLIC_PREFIX}/{{file_path:path}}",
    summary="Serve a public storage file",
    responses={
        200: {"description": "File contents"},
        404: {"description": "File not found"},
    },
)
async def serve_file(file_path: str) -> FileResponse:
    storage_root = image_service.storage_root
    full_path = (storage_root / file_path).resolve()

    if storage_root not in full_path.parents:
        raise ValidationError(errors={"path": ["Invalid file path."]})

    if not full_path.is_file():
        raise NotFoundError(resource="file", resource_id=file_path)

    # media type is guessed from the file extension
    return FileResponse(
        path=str(full_path),
        headers={"Cache-Control": "public, max-age=86400"},
    )

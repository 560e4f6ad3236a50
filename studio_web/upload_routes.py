"""Image upload, image listing and health endpoints"""

import time

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from studio_cms.auth.tokens import TokenClaims
from studio_cms.services.upload_service import FIELD_NAME, UploadService
from studio_cms.utils.exceptions import InvalidFileError, NoFileError, UnexpectedFileError
from studio_cms.utils.logger import get_logger

from .auth_deps import require_admin
from .responses import success_response

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["uploads"])


def get_upload_service(request: Request) -> UploadService:
    return request.app.state.upload_service


@router.post("/upload")
async def upload_image(
    request: Request,
    service: UploadService = Depends(get_upload_service),
    claims: TokenClaims = Depends(require_admin),
):
    """Accept exactly one image in the ``image`` multipart field"""
    content_type = request.headers.get("content-type", "")
    if not content_type.startswith("multipart/form-data"):
        raise NoFileError()

    form = await request.form()
    try:
        files = [value for value in form.getlist(FIELD_NAME) if isinstance(value, UploadFile)]
        stray = [
            key for key, value in form.multi_items()
            if key != FIELD_NAME and isinstance(value, UploadFile)
        ]
        if stray:
            raise UnexpectedFileError(f"Unexpected file field: {stray[0]}")
        if len(files) > 1:
            raise UnexpectedFileError("Only one file may be uploaded")
        if not files:
            raise NoFileError()

        upload = files[0]
        if not upload.filename:
            raise InvalidFileError("Uploaded file has no name")
        stored = await run_in_threadpool(service.store, upload.file, upload.filename, upload.content_type)
    finally:
        await form.close()

    logger.info("Image uploaded", path=stored["path"], user_id=claims.id)
    return success_response(**stored)


@router.get("/images")
async def list_images(service: UploadService = Depends(get_upload_service)):
    """Flat listing of every image under the public images directory"""
    images = await run_in_threadpool(service.list_images)
    return success_response(data=images)


@router.get("/health")
async def health(request: Request):
    return success_response(status="healthy", uptime=round(time.monotonic() - request.app.state.started_at, 3))

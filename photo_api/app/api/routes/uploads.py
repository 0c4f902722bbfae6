import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.datastructures import FormData, UploadFile

from photo_api.app.api.deps import get_app_settings, get_blob_store
from photo_api.app.core.config import Settings
from photo_api.app.schemas.upload import (
    Base64UploadRequest,
    ErrorResponse,
    IngestionRequest,
    UploadResponse,
)
from photo_api.app.services import ingestion_service
from photo_api.app.services.errors import ValidationError
from photo_api.app.services.staging import stage_upload
from photo_api.app.services.storage.base import BlobStore

router = APIRouter(prefix="/api", tags=["uploads"])
logger = logging.getLogger(__name__)

MULTIPART_FILE_FIELD = "file"


def _form_text(form: FormData, key: str):
    value = form.get(key)
    return value if isinstance(value, str) and value else None


async def _base64_intake(request: Request) -> IngestionRequest:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError("Invalid JSON body") from None
    if not isinstance(body, dict):
        raise ValidationError("Invalid JSON body")
    try:
        payload = Base64UploadRequest.model_validate(body)
    except PydanticValidationError:
        raise ValidationError("Missing base64Data, clientId, or type") from None
    if not payload.base64_data or not payload.client_id or not payload.type:
        raise ValidationError("Missing base64Data, clientId, or type")
    return IngestionRequest(
        intake="base64",
        client_id=payload.client_id,
        type=payload.type,
        original_filename=payload.file_name,
        base64_data=payload.base64_data,
    )


async def _multipart_intake(request: Request, settings: Settings) -> IngestionRequest:
    form = await request.form()
    try:
        upload = form.get(MULTIPART_FILE_FIELD)
        if not isinstance(upload, UploadFile):
            raise ValidationError("No file uploaded")
        client_id = _form_text(form, "clientId")
        photo_type = _form_text(form, "type")
        if not client_id or not photo_type:
            raise ValidationError("Missing clientId or type")
        staged_path = await stage_upload(
            upload,
            settings.upload_staging_dir,
            max_bytes=settings.upload_max_bytes,
            allowed_mime_prefix=settings.upload_allowed_mime_prefix,
            field_name=MULTIPART_FILE_FIELD,
        )
    finally:
        await form.close()
    return IngestionRequest(
        intake="multipart",
        client_id=client_id,
        type=photo_type,
        original_filename=upload.filename,
        content_type=upload.content_type,
        staged_path=staged_path,
    )


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def upload_image(
    request: Request,
    store: BlobStore = Depends(get_blob_store),
    settings: Settings = Depends(get_app_settings),
):
    content_type = request.headers.get("content-type", "").lower()
    if "application/json" in content_type:
        ingestion_request = await _base64_intake(request)
    elif "multipart/form-data" in content_type:
        ingestion_request = await _multipart_intake(request, settings)
    else:
        logger.info("Upload with unsupported Content-Type %r", content_type)
        raise ValidationError("Unsupported Content-Type; expected application/json or multipart/form-data")

    result = await ingestion_service.ingest(ingestion_request, store, settings)
    if not result.success:
        return JSONResponse(
            status_code=result.status_code,
            content=ErrorResponse(error=result.error_message).model_dump(),
        )
    return UploadResponse(url=result.url, filename=result.filename, size=result.size)

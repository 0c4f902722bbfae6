import asyncio
import base64
import binascii
import logging
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Tuple

from photo_api.app.core.config import Settings
from photo_api.app.schemas.upload import IngestionRequest, IngestionResult
from photo_api.app.services import filenames, image_normalizer, url_resolver
from photo_api.app.services.errors import PhotoApiError, ValidationError
from photo_api.app.services.staging import is_allowed_mime
from photo_api.app.services.storage.base import BlobStore

logger = logging.getLogger(__name__)

_DATA_URL_RE = re.compile(r"^data:(?P<mime>[^;,]*)(?:;[^,]*)?,", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")


def _split_data_url(value: str) -> Tuple[Optional[str], str]:
    """Strip a ``data:<mime>;base64,`` prefix, returning (mime, payload)."""
    match = _DATA_URL_RE.match(value)
    if not match:
        return None, value
    return (match.group("mime") or None), value[match.end():]


def decode_base64_payload(value: Optional[str], allowed_mime_prefix: str = "image/", max_bytes: Optional[int] = None) -> bytes:
    if not value:
        raise ValidationError("Missing base64Data")
    mime, payload = _split_data_url(value.strip())
    if mime and not is_allowed_mime(mime, allowed_mime_prefix):
        raise ValidationError("Only image files are allowed")
    payload = _WHITESPACE_RE.sub("", payload)
    if max_bytes is not None and len(payload) * 3 // 4 > max_bytes + 2:
        raise ValidationError("File too large")
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Invalid base64Data") from None
    if not data:
        raise ValidationError("Invalid base64Data")
    if max_bytes is not None and len(data) > max_bytes:
        raise ValidationError("File too large")
    return data


def validate_request(request: IngestionRequest) -> None:
    if request.intake == "base64":
        if not request.base64_data or not request.client_id or not request.type:
            raise ValidationError("Missing base64Data, clientId, or type")
        return
    if request.staged_path is None:
        raise ValidationError("No file uploaded")
    if not request.client_id or not request.type:
        raise ValidationError("Missing clientId or type")


@contextmanager
def staged_file(path: Optional[Path]) -> Iterator[Optional[Path]]:
    """Yield the staged upload and remove it on exit, whatever the outcome."""
    try:
        yield path
    finally:
        if path is not None:
            try:
                path.unlink(missing_ok=True)
            except OSError:
                logger.warning("Failed to remove staged upload %s", path, exc_info=True)


async def _read_source(request: IngestionRequest, settings: Settings) -> bytes:
    loop = asyncio.get_running_loop()
    if request.intake == "base64":
        return decode_base64_payload(
            request.base64_data,
            allowed_mime_prefix=settings.upload_allowed_mime_prefix,
            max_bytes=settings.upload_max_bytes,
        )
    if request.content_type and not is_allowed_mime(request.content_type, settings.upload_allowed_mime_prefix):
        raise ValidationError("Only image files are allowed")
    return await loop.run_in_executor(None, request.staged_path.read_bytes)


async def ingest(request: IngestionRequest, store: BlobStore, settings: Settings) -> IngestionResult:
    """
    Run one upload through decode, normalize and store.

    Expected failures (validation, decode, storage) come back as an unsuccessful
    result carrying the status code they map to. The staged file of a multipart
    upload is removed on every exit path.
    """
    loop = asyncio.get_running_loop()
    log_extra = {
        "client_id": request.client_id,
        "photo_type": request.type,
        "intake": request.intake,
        "original_filename": request.original_filename,
    }
    with staged_file(request.staged_path):
        try:
            validate_request(request)
            raw = await _read_source(request, settings)
            canonical = await loop.run_in_executor(
                None,
                image_normalizer.normalize,
                raw,
                settings.image_max_dimension,
                settings.image_jpeg_quality,
            )
            filename = filenames.generate_unique(request.filename_prefix, store.exists)
            await loop.run_in_executor(None, store.put, filename, canonical)
        except PhotoApiError as exc:
            logger.warning("Upload rejected: %s", exc.message, extra={**log_extra, "error_code": exc.error_code})
            return IngestionResult(
                success=False,
                error_code=exc.error_code,
                error_message=exc.message,
                status_code=exc.status_code,
            )

    url = url_resolver.resolve_public_url(filename, url_resolver.public_base_url(settings))
    logger.info(
        "Image uploaded successfully",
        extra={**log_extra, "stored_filename": filename, "url": url, "size": len(canonical), "source_size": len(raw)},
    )
    return IngestionResult(success=True, url=url, filename=filename, size=len(canonical))

"""
Staging of multipart uploads.

The multipart intake writes the uploaded part to a staging directory before
ingestion reads it back. Transport limits (size cap, image MIME filter) are
enforced here so oversized or non-image parts never reach the normalizer.
"""
import logging
import time
from pathlib import Path
from typing import Optional

from starlette.datastructures import UploadFile

from photo_api.app.services import filenames
from photo_api.app.services.errors import UploadRejectedError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


def is_allowed_mime(content_type: Optional[str], allowed_prefix: str) -> bool:
    return bool(content_type) and content_type.lower().startswith(allowed_prefix)


async def stage_upload(
    file: UploadFile,
    staging_dir: Path,
    max_bytes: int,
    allowed_mime_prefix: str = "image/",
    field_name: str = "file",
) -> Path:
    """
    Copy an uploaded part into the staging directory and return its path.

    The partial file is removed when a limit is hit mid-copy.

    Raises:
        UploadRejectedError: For a non-image MIME type or a file over ``max_bytes``.
    """
    if not is_allowed_mime(file.content_type, allowed_mime_prefix):
        raise UploadRejectedError("Only image files are allowed")

    staging_dir.mkdir(parents=True, exist_ok=True)
    destination = staging_dir / filenames.generate(field_name, suffix=".upload")
    written = 0
    try:
        with destination.open("wb") as buffer:
            await file.seek(0)
            while True:
                chunk = await file.read(CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if written > max_bytes:
                    raise UploadRejectedError("File too large")
                buffer.write(chunk)
    except BaseException:
        destination.unlink(missing_ok=True)
        raise
    logger.debug("Staged upload %s (%s bytes) at %s", file.filename, written, destination)
    return destination


def purge_stale(staging_dir: Path, max_age_minutes: int, now: Optional[float] = None) -> int:
    """Delete staged files older than ``max_age_minutes``; returns how many were removed."""
    if not staging_dir.is_dir():
        return 0
    cutoff = (now if now is not None else time.time()) - max_age_minutes * 60
    removed = 0
    for path in staging_dir.iterdir():
        if not path.is_file():
            continue
        try:
            if path.stat().st_mtime < cutoff:
                path.unlink()
                removed += 1
        except FileNotFoundError:
            continue
    return removed

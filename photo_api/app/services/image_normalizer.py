"""
Canonical image encoding.

Every stored photo is re-encoded to a JPEG that fits inside a square bound.
Small images are never upscaled, so the bound only ever shrinks an image.
"""
import logging
from io import BytesIO
from typing import Tuple

from PIL import Image, UnidentifiedImageError

from photo_api.app.services.errors import DecodeError

logger = logging.getLogger(__name__)

DEFAULT_MAX_DIMENSION = 400
DEFAULT_JPEG_QUALITY = 80


def _open(data: bytes) -> Image.Image:
    if not data:
        raise DecodeError("Invalid image data")
    try:
        img = Image.open(BytesIO(data))
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as exc:
        logger.info("Rejecting undecodable image payload (%s bytes): %s", len(data), exc)
        raise DecodeError("Invalid image data") from exc
    return img


def image_dimensions(data: bytes) -> Tuple[int, int]:
    """Return (width, height) of an encoded image."""
    with _open(data) as img:
        return img.size


def normalize(
    data: bytes,
    max_dimension: int = DEFAULT_MAX_DIMENSION,
    quality: int = DEFAULT_JPEG_QUALITY,
) -> bytes:
    """
    Decode an image buffer and re-encode it as the canonical JPEG.

    The result fits inside ``max_dimension`` x ``max_dimension`` with the
    aspect ratio preserved. Images already inside the bound keep their size.

    Raises:
        DecodeError: If the buffer is not a recognizable image.
    """
    with _open(data) as img:
        w, h = img.size
        if img.mode != "RGB":
            img = img.convert("RGB")
        if max(w, h) > max_dimension:
            # thumbnail() keeps the aspect ratio and never enlarges.
            img.thumbnail((max_dimension, max_dimension), Image.LANCZOS)
        out = BytesIO()
        try:
            img.save(out, format="JPEG", quality=quality)
        except OSError as exc:
            raise DecodeError("Invalid image data") from exc
    logger.debug("Normalized %sx%s image to %sx%s (%s bytes)", w, h, img.size[0], img.size[1], out.tell())
    return out.getvalue()

import logging
from typing import Optional

from photo_api.app.services import url_resolver
from photo_api.app.services.errors import InvalidFilenameError, NotFoundError, ValidationError
from photo_api.app.services.storage.base import BlobStore, StoredImageInfo

logger = logging.getLogger(__name__)


def delete_image(store: BlobStore, image_url: Optional[str]) -> None:
    """Delete a stored image by URL or filename. Deleting an absent image succeeds."""
    if not image_url or not image_url.strip():
        raise ValidationError("Missing imageUrl")
    filename = url_resolver.extract_filename(image_url)
    removed = store.delete(filename)
    if removed:
        logger.info("Image deleted successfully: %s", filename)
    else:
        logger.info("Delete requested for absent image %s", filename)


def get_image_info(store: BlobStore, filename: str) -> StoredImageInfo:
    try:
        return store.stat(filename)
    except InvalidFilenameError:
        raise NotFoundError("File not found") from None

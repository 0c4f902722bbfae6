import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from photo_api.app.services.errors import InvalidFilenameError, NotFoundError, StorageError
from photo_api.app.services.storage.base import BlobStore, StoredImageInfo

logger = logging.getLogger(__name__)

_FORBIDDEN_CHARS = ("/", "\\", "\x00")


class LocalBlobStore(BlobStore):
    """Canonical images stored flat under a single directory, addressed by filename."""

    def __init__(self, root: Path):
        self.root = Path(root).resolve()
        self.root.mkdir(parents=True, exist_ok=True)

    def resolve_path(self, filename: str) -> Path:
        if not filename or filename in (".", ".."):
            raise InvalidFilenameError("Invalid filename")
        if any(ch in filename for ch in _FORBIDDEN_CHARS):
            raise InvalidFilenameError("Invalid filename")
        path = (self.root / filename).resolve()
        if path.parent != self.root:
            raise InvalidFilenameError("Invalid filename")
        return path

    def put(self, filename: str, data: bytes) -> Path:
        destination = self.resolve_path(filename)
        # Write beside the destination and rename so readers never see a partial file.
        fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=".put-", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as buffer:
                buffer.write(data)
            os.replace(tmp_name, destination)
        except OSError as exc:
            logger.exception("Failed to write %s", filename)
            Path(tmp_name).unlink(missing_ok=True)
            raise StorageError("Failed to store image") from exc
        logger.debug("Stored %s (%s bytes)", filename, len(data))
        return destination

    def exists(self, filename: str) -> bool:
        return self.resolve_path(filename).is_file()

    def stat(self, filename: str) -> StoredImageInfo:
        path = self.resolve_path(filename)
        try:
            st = path.stat()
        except FileNotFoundError:
            raise NotFoundError("File not found") from None
        if not path.is_file():
            raise NotFoundError("File not found")
        created = getattr(st, "st_birthtime", st.st_ctime)
        return StoredImageInfo(
            filename=filename,
            size=st.st_size,
            created=datetime.fromtimestamp(created, tz=timezone.utc),
            modified=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
        )

    def delete(self, filename: str) -> bool:
        path = self.resolve_path(filename)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            logger.exception("Failed to delete %s", filename)
            raise StorageError("Failed to delete image") from exc
        return True

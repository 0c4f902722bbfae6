class PhotoApiError(Exception):
    """Base class for failures that map onto a client-visible error response."""

    status_code = 500
    error_code = "internal_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PhotoApiError):
    """Missing or malformed required fields."""

    status_code = 400
    error_code = "validation_error"


class InvalidFilenameError(ValidationError):
    """Filename is empty or would resolve outside the blob directory."""

    error_code = "invalid_filename"


class UploadRejectedError(ValidationError):
    """Raised by the staging step when a multipart file breaks the transport limits."""

    error_code = "upload_rejected"

    def __init__(self, reason: str):
        super().__init__(f"File upload error: {reason}")
        self.reason = reason


class DecodeError(PhotoApiError):
    """Payload is not a recognizable image."""

    status_code = 400
    error_code = "decode_error"


class StorageError(PhotoApiError):
    """Disk read/write failure in the blob store."""

    status_code = 500
    error_code = "storage_error"


class NotFoundError(PhotoApiError):
    status_code = 404
    error_code = "not_found"

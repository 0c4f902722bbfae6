import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

from photo_api.app.api.routes import api_router
from photo_api.app.core.config import Settings, ensure_directories, get_settings
from photo_api.app.schemas.upload import HealthResponse
from photo_api.app.services.errors import PhotoApiError
from photo_api.app.services.storage.local import LocalBlobStore

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def _error_body(message: str, **extra) -> dict:
    return {"success": False, "error": message, **extra}


async def photo_api_exception_handler(request: Request, exc: PhotoApiError):
    if exc.status_code >= 500:
        logger.error("Request failed with %s: %s", exc.error_code, exc.message)
    else:
        logger.info("Request rejected with %s: %s", exc.error_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message))


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    request_id = str(uuid.uuid4())
    details = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", []) if part is not None)
        msg = err.get("msg", "Invalid value")
        details.append({"field": loc or None, "message": msg})
    logger.info("Invalid request payload (request_id=%s): %s", request_id, details)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body("Invalid request payload.", details=details, request_id=request_id),
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(INTERNAL_ERROR_MESSAGE),
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = ensure_directories(settings) if settings is not None else get_settings()
    app = FastAPI(title="Photo Storage API", version="0.1.0")
    app.state.settings = settings
    app.state.blob_store = LocalBlobStore(settings.upload_dir)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(PhotoApiError, photo_api_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="OK", timestamp=datetime.now(timezone.utc))

    app.include_router(api_router)
    # Mounted last so the API routes above take precedence over "/<filename>".
    app.mount("/", StaticFiles(directory=settings.upload_dir), name="images")

    logger.info("Uploads directory: %s", settings.upload_dir.resolve())
    return app

from typing import Optional

from fastapi import APIRouter, Depends

from photo_api.app.api.deps import get_blob_store
from photo_api.app.schemas.upload import DeleteRequest, ErrorResponse, ImageInfoResponse, SuccessResponse
from photo_api.app.services import photo_service
from photo_api.app.services.storage.base import BlobStore

router = APIRouter(prefix="/api", tags=["images"])


@router.delete("/delete", response_model=SuccessResponse, responses={400: {"model": ErrorResponse}})
def delete_image(
    payload: Optional[DeleteRequest] = None,
    store: BlobStore = Depends(get_blob_store),
):
    photo_service.delete_image(store, payload.image_url if payload else None)
    return SuccessResponse()


@router.get("/info/{filename}", response_model=ImageInfoResponse, responses={404: {"model": ErrorResponse}})
def get_image_info(filename: str, store: BlobStore = Depends(get_blob_store)):
    info = photo_service.get_image_info(store, filename)
    return ImageInfoResponse(
        filename=info.filename,
        size=info.size,
        created=info.created,
        modified=info.modified,
    )

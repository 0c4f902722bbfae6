from fastapi import Request

from photo_api.app.core.config import Settings
from photo_api.app.services.storage.base import BlobStore


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_blob_store(request: Request) -> BlobStore:
    return request.app.state.blob_store

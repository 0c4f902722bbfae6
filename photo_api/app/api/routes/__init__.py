from fastapi import APIRouter

from photo_api.app.api.routes import images, uploads

api_router = APIRouter()
api_router.include_router(uploads.router)
api_router.include_router(images.router)

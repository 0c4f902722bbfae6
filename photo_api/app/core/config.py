import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    host: str = Field("0.0.0.0", alias="HOST")
    port: int = Field(3000, alias="PORT")
    # Hosting platforms expose the public domain without a scheme.
    public_base_url: Optional[str] = Field(
        None, validation_alias=AliasChoices("PUBLIC_BASE_URL", "RAILWAY_PUBLIC_DOMAIN")
    )
    upload_dir: Path = Field(Path("uploads"), alias="UPLOAD_DIR")
    upload_staging_dir: Path = Field(Path("uploads-staging"), alias="UPLOAD_STAGING_DIR")
    upload_max_bytes: int = Field(10 * 1024 * 1024, alias="UPLOAD_MAX_BYTES")
    upload_allowed_mime_prefix: str = Field("image/", alias="UPLOAD_ALLOWED_MIME_PREFIX")
    image_max_dimension: int = Field(400, alias="IMAGE_MAX_DIMENSION")
    image_jpeg_quality: int = Field(80, alias="IMAGE_JPEG_QUALITY")
    cors_allow_origins: List[str] = Field(default_factory=lambda: ["*"], alias="CORS_ALLOW_ORIGINS")
    staging_max_age_minutes: int = Field(60, alias="STAGING_MAX_AGE_MINUTES")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")


logger = logging.getLogger(__name__)


def ensure_directories(settings: Settings) -> Settings:
    settings.upload_dir.mkdir(parents=True, exist_ok=True)
    settings.upload_staging_dir.mkdir(parents=True, exist_ok=True)
    return settings


@lru_cache
def get_settings() -> Settings:
    try:
        settings = Settings()
    except PermissionError:
        logger.warning("Unable to read .env; continuing with environment variables only")
        settings = Settings(_env_file=None)
    return ensure_directories(settings)

from datetime import datetime
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Base64UploadRequest(BaseModel):
    # Fields are optional so missing values produce the API's own error message.
    base64_data: Optional[str] = Field(default=None, alias="base64Data")
    client_id: Optional[str] = Field(default=None, alias="clientId")
    type: Optional[str] = None
    file_name: Optional[str] = Field(default=None, alias="fileName")

    model_config = ConfigDict(populate_by_name=True)


class IngestionRequest(BaseModel):
    intake: Literal["base64", "multipart"]
    client_id: Optional[str] = None
    type: Optional[str] = None
    original_filename: Optional[str] = None
    content_type: Optional[str] = None
    base64_data: Optional[str] = None
    staged_path: Optional[Path] = None

    @model_validator(mode="after")
    def _single_payload(self) -> "IngestionRequest":
        if self.base64_data is not None and self.staged_path is not None:
            raise ValueError("base64_data and staged_path are mutually exclusive")
        return self

    @property
    def filename_prefix(self) -> str:
        return "base64" if self.intake == "base64" else "file"


class IngestionResult(BaseModel):
    success: bool
    url: Optional[str] = None
    filename: Optional[str] = None
    size: Optional[int] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None
    status_code: int = 200


class UploadResponse(BaseModel):
    success: bool = True
    url: str
    filename: str
    size: int


class DeleteRequest(BaseModel):
    image_url: Optional[str] = Field(default=None, alias="imageUrl")

    model_config = ConfigDict(populate_by_name=True)


class SuccessResponse(BaseModel):
    success: bool = True


class ImageInfoResponse(BaseModel):
    success: bool = True
    filename: str
    size: int
    created: datetime
    modified: datetime


class ErrorResponse(BaseModel):
    success: bool = False
    error: str


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime

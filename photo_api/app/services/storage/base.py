from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel


class StoredImageInfo(BaseModel):
    filename: str
    size: int
    created: datetime
    modified: datetime


class BlobStore(ABC):
    @abstractmethod
    def put(self, filename: str, data: bytes) -> Path:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    def exists(self, filename: str) -> bool:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    def stat(self, filename: str) -> StoredImageInfo:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    def delete(self, filename: str) -> bool:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    def resolve_path(self, filename: str) -> Path:  # pragma: no cover - interface
        raise NotImplementedError

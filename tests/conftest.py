from io import BytesIO

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from photo_api.app.core.config import Settings
from photo_api.app.main import create_app
from photo_api.app.services.storage.local import LocalBlobStore

PUBLIC_BASE_URL = "http://testserver"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        UPLOAD_DIR=str(tmp_path / "uploads"),
        UPLOAD_STAGING_DIR=str(tmp_path / "staging"),
        PUBLIC_BASE_URL=PUBLIC_BASE_URL,
    )


@pytest.fixture
def store(settings):
    return LocalBlobStore(settings.upload_dir)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def make_image():
    def _make(width: int, height: int, fmt: str = "JPEG", mode: str = "RGB", color=(200, 80, 40)) -> bytes:
        if mode == "RGBA" and len(color) == 3:
            color = (*color, 128)
        if mode == "P":
            img = Image.new("RGB", (width, height), color).convert("P")
        else:
            img = Image.new(mode, (width, height), color)
        out = BytesIO()
        img.save(out, format=fmt)
        return out.getvalue()

    return _make

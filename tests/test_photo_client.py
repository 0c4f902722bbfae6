import base64
import json

import httpx
import pytest

from photo_api.app.services.photo_client import PhotoClientError, PhotoStorageClient


def _mock_client(handler) -> PhotoStorageClient:
    return PhotoStorageClient("http://photos.test/", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_upload_base64_sends_json_payload():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json={"success": True, "url": "http://photos.test/base64-1-2.jpg", "filename": "base64-1-2.jpg", "size": 42})

    result = await _mock_client(handler).upload_base64(b"\xff\xd8\xffdata", "c1", "progress", file_name="p.jpg")

    assert captured["url"] == "http://photos.test/api/upload"
    assert base64.b64decode(captured["body"]["base64Data"]) == b"\xff\xd8\xffdata"
    assert captured["body"]["clientId"] == "c1"
    assert captured["body"]["type"] == "progress"
    assert captured["body"]["fileName"] == "p.jpg"
    assert result.filename == "base64-1-2.jpg"
    assert result.size == 42


@pytest.mark.asyncio
async def test_upload_file_sends_multipart():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["content_type"] = request.headers["content-type"]
        captured["body"] = request.read()
        return httpx.Response(200, json={"success": True, "url": "http://photos.test/file-1-2.jpg", "filename": "file-1-2.jpg", "size": 7})

    result = await _mock_client(handler).upload_file(b"imagebytes", "c9", "weight")

    assert captured["content_type"].startswith("multipart/form-data")
    assert b'name="clientId"' in captured["body"]
    assert b'name="file"; filename="c9_weight.jpg"' in captured["body"]
    assert b"imagebytes" in captured["body"]
    assert result.url.endswith("file-1-2.jpg")


@pytest.mark.asyncio
async def test_error_response_raises_with_server_message():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"success": False, "error": "Missing clientId or type"})

    with pytest.raises(PhotoClientError) as excinfo:
        await _mock_client(handler).upload_file(b"x", "", "progress")
    assert excinfo.value.status_code == 400
    assert str(excinfo.value) == "Missing clientId or type"


@pytest.mark.asyncio
async def test_transport_error_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(PhotoClientError) as excinfo:
        await _mock_client(handler).delete("http://photos.test/a.jpg")
    assert excinfo.value.status_code is None


@pytest.mark.asyncio
async def test_download_and_delete():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET":
            return httpx.Response(200, content=b"jpegbytes")
        assert json.loads(request.content) == {"imageUrl": "http://photos.test/a.jpg"}
        return httpx.Response(200, json={"success": True})

    client = _mock_client(handler)
    assert await client.download_base64("http://photos.test/a.jpg") == base64.b64encode(b"jpegbytes").decode()
    assert await client.delete("http://photos.test/a.jpg") is True


@pytest.mark.asyncio
async def test_client_against_app(app, make_image):
    client = PhotoStorageClient("http://testserver", transport=httpx.ASGITransport(app=app))

    uploaded = await client.upload_base64(make_image(500, 250), "c1", "progress")
    downloaded = base64.b64decode(await client.download_base64(uploaded.url))
    assert len(downloaded) == uploaded.size

    via_file = await client.upload_file(make_image(50, 50, fmt="PNG"), "c1", "client", content_type="image/png")
    assert via_file.filename.startswith("file-")

    assert await client.delete(uploaded.url) is True
    assert await client.delete(uploaded.url) is True
    with pytest.raises(PhotoClientError) as excinfo:
        await client.download_base64(uploaded.url)
    assert excinfo.value.status_code == 404

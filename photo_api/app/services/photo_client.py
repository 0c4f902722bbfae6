"""
Client for the photo storage API.

Used by callers that upload progress/weight/client photos and later fetch or
delete them by their public URL. Uploads go either as a base64 JSON body or
as a multipart file part; both land on the same ``/api/upload`` endpoint.
"""
import base64
import logging
from typing import Optional

import httpx

from photo_api.app.schemas.upload import UploadResponse

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


class PhotoClientError(Exception):
    """Raised when the photo storage API rejects a request or is unreachable."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:500] or resp.reason_phrase
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return resp.reason_phrase


class PhotoStorageClient:
    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = httpx.Timeout(timeout_seconds, connect=10.0)
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            async with self._client() as client:
                resp = await client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("Photo storage request %s %s failed: %s", method, url, exc)
            raise PhotoClientError(f"Photo storage unreachable: {exc}") from exc
        if resp.status_code >= 400:
            message = _error_message(resp)
            logger.warning("Photo storage returned %s for %s %s: %s", resp.status_code, method, url, message)
            raise PhotoClientError(message, status_code=resp.status_code)
        return resp

    async def upload_base64(
        self,
        image: bytes,
        client_id: str,
        photo_type: str,
        file_name: Optional[str] = None,
    ) -> UploadResponse:
        payload = {
            "base64Data": base64.b64encode(image).decode("utf-8"),
            "clientId": client_id,
            "type": photo_type,
        }
        if file_name:
            payload["fileName"] = file_name
        resp = await self._request("POST", f"{self.base_url}/api/upload", json=payload)
        result = UploadResponse.model_validate(resp.json())
        logger.info("Image uploaded to photo storage: %s", result.url)
        return result

    async def upload_file(
        self,
        image: bytes,
        client_id: str,
        photo_type: str,
        file_name: Optional[str] = None,
        content_type: str = "image/jpeg",
    ) -> UploadResponse:
        name = file_name or f"{client_id}_{photo_type}.jpg"
        resp = await self._request(
            "POST",
            f"{self.base_url}/api/upload",
            files={"file": (name, image, content_type)},
            data={"clientId": client_id, "type": photo_type},
        )
        result = UploadResponse.model_validate(resp.json())
        logger.info("Image uploaded to photo storage: %s", result.url)
        return result

    async def download_base64(self, image_url: str) -> str:
        """Fetch a stored image by its public URL and return it base64-encoded."""
        resp = await self._request("GET", image_url)
        return base64.b64encode(resp.content).decode("utf-8")

    async def delete(self, image_url: str) -> bool:
        resp = await self._request("DELETE", f"{self.base_url}/api/delete", json={"imageUrl": image_url})
        return bool(resp.json().get("success"))

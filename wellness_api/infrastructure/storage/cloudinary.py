"""Cloudinary implementation of RemoteAssetStore.

Talks to the Cloudinary upload API over httpx with signed requests. Uploads
go to ``/{resource_type}/upload`` inside a per-slot folder; deletes go to
``/{resource_type}/destroy`` by public id.
"""

import logging
import time
from typing import Any, Dict, Optional

import httpx

from wellness_api.core.errors import AssetStoreError
from wellness_api.core.security import sign_cloudinary_params
from wellness_api.domains.content.entities import AssetKind, AssetReference
from wellness_api.infrastructure.storage.base import AssetDownload, RemoteAssetStore

logger = logging.getLogger(__name__)


class CloudinaryAssetStore(RemoteAssetStore):

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        base_url: str = "https://api.cloudinary.com/v1_1",
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def boot(self) -> None:
        """Initialise the HTTP client"""
        if not (self.cloud_name and self.api_key and self.api_secret):
            logger.warning("Cloudinary credentials are incomplete, uploads will fail")
        self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport, follow_redirects=True)

    async def close(self) -> None:
        """Close the HTTP client"""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _endpoint(self, kind: AssetKind, action: str) -> str:
        return f"{self.base_url}/{self.cloud_name}/{kind.value}/{action}"

    def _signed(self, params: Dict[str, Any]) -> Dict[str, Any]:
        params = dict(params, timestamp=int(time.time()))
        params["signature"] = sign_cloudinary_params(params, self.api_secret)
        params["api_key"] = self.api_key
        return params

    async def _post(self, url: str, data: Dict[str, Any], files: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        if self._client is None:
            raise AssetStoreError("HTTP client not initialised. Call boot() before making requests.")

        try:
            response = await self._client.post(url, data=data, files=files)
        except httpx.HTTPError as e:
            raise AssetStoreError(f"Request to {url} failed: {e}") from e

        if response.status_code >= 300:
            logger.error("Request to %s failed with status %d: %s", url, response.status_code, response.text)
            raise AssetStoreError(
                f"Request to {url} failed with status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise AssetStoreError(f"Invalid response from {url}") from e

    async def put(
        self,
        content: bytes,
        folder: str,
        kind: AssetKind,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> AssetReference:
        data = self._signed({"folder": folder})
        files = {"file": (filename or "upload", content, content_type or "application/octet-stream")}
        body = await self._post(self._endpoint(kind, "upload"), data=data, files=files)

        public_id = body.get("public_id")
        secure_url = body.get("secure_url")
        if not public_id or not secure_url:
            raise AssetStoreError("Upload response is missing public_id or secure_url")
        return AssetReference(remote_key=public_id, url=secure_url)

    async def destroy(self, remote_key: str, kind: AssetKind) -> None:
        data = self._signed({"public_id": remote_key})
        body = await self._post(self._endpoint(kind, "destroy"), data=data)

        result = body.get("result")
        if result == "not found":
            logger.debug("Cloudinary object %s was already gone", remote_key)
        elif result != "ok":
            raise AssetStoreError(f"Destroy of {remote_key} returned '{result}'")

    async def open_download(self, url: str) -> AssetDownload:
        if self._client is None:
            raise AssetStoreError("HTTP client not initialised. Call boot() before making requests.")

        try:
            response = await self._client.send(self._client.build_request("GET", url), stream=True)
        except httpx.HTTPError as e:
            raise AssetStoreError(f"Download of {url} failed: {e}") from e

        if response.status_code >= 300:
            await response.aclose()
            raise AssetStoreError(
                f"Download of {url} failed with status {response.status_code}",
                status_code=response.status_code,
            )

        length = response.headers.get("content-length")
        return AssetDownload(
            chunks=response.aiter_bytes(),
            close=response.aclose,
            content_type=response.headers.get("content-type"),
            content_length=int(length) if length and length.isdigit() else None,
        )

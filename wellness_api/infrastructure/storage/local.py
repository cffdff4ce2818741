"""Filesystem implementation of RemoteAssetStore for development setups."""

import asyncio
import logging
import mimetypes
import os
import uuid
from pathlib import Path
from typing import AsyncIterator, Optional

from wellness_api.core.errors import AssetStoreError
from wellness_api.domains.content.entities import AssetKind, AssetReference
from wellness_api.infrastructure.storage.base import AssetDownload, RemoteAssetStore

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


class LocalAssetStore(RemoteAssetStore):
    """Stores objects under ``root`` and serves them from ``url_prefix``"""

    def __init__(self, root: str, url_prefix: str = "/uploads"):
        self.root = Path(root).resolve()
        self.url_prefix = "/" + url_prefix.strip("/")

    async def boot(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    def _path_for(self, remote_key: str) -> Path:
        path = (self.root / remote_key).resolve()
        if self.root not in path.parents:
            raise AssetStoreError(f"Key '{remote_key}' points outside the upload directory")
        return path

    async def put(
        self,
        content: bytes,
        folder: str,
        kind: AssetKind,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> AssetReference:
        extension = os.path.splitext(filename or "")[1].lower()
        if not extension and content_type:
            extension = mimetypes.guess_extension(content_type) or ""
        remote_key = f"{folder.strip('/')}/{uuid.uuid4().hex}{extension}"
        path = self._path_for(remote_key)

        def write() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)

        try:
            await asyncio.to_thread(write)
        except OSError as e:
            raise AssetStoreError(f"Could not write {remote_key}: {e}") from e
        return AssetReference(remote_key=remote_key, url=f"{self.url_prefix}/{remote_key}")

    async def destroy(self, remote_key: str, kind: AssetKind) -> None:
        path = self._path_for(remote_key)
        try:
            await asyncio.to_thread(path.unlink, True)
        except OSError as e:
            raise AssetStoreError(f"Could not delete {remote_key}: {e}") from e

    async def open_download(self, url: str) -> AssetDownload:
        if not url.startswith(self.url_prefix + "/"):
            raise AssetStoreError(f"URL '{url}' is not served by this store")
        path = self._path_for(url[len(self.url_prefix) + 1:])

        try:
            handle = await asyncio.to_thread(path.open, "rb")
        except OSError as e:
            raise AssetStoreError(f"Could not open {url}: {e}") from e

        async def chunks() -> AsyncIterator[bytes]:
            while True:
                chunk = await asyncio.to_thread(handle.read, CHUNK_SIZE)
                if not chunk:
                    break
                yield chunk

        async def close() -> None:
            await asyncio.to_thread(handle.close)

        return AssetDownload(
            chunks=chunks(),
            close=close,
            content_type=mimetypes.guess_type(path.name)[0],
            content_length=path.stat().st_size,
        )

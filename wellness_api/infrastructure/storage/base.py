from abc import ABC, abstractmethod
from typing import AsyncIterator, Awaitable, Callable, Optional

from wellness_api.domains.content.entities import AssetKind, AssetReference


class AssetDownload:
    """An open streaming download from the asset store.

    The owner must call :meth:`aclose` once done, including when the
    downstream client went away mid-stream.
    """

    def __init__(
        self,
        chunks: AsyncIterator[bytes],
        close: Callable[[], Awaitable[None]],
        content_type: Optional[str] = None,
        content_length: Optional[int] = None,
    ):
        self._chunks = chunks
        self._close = close
        self.content_type = content_type
        self.content_length = content_length
        self.closed = False

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self._chunks

    async def aclose(self) -> None:
        if self.closed:
            return
        self.closed = True
        await self._close()


class RemoteAssetStore(ABC):
    """Object storage holding the bytes behind every AssetReference."""

    async def boot(self) -> None:
        """Acquire connections or other resources"""

    async def close(self) -> None:
        """Release connections or other resources"""

    @abstractmethod
    async def put(
        self,
        content: bytes,
        folder: str,
        kind: AssetKind,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> AssetReference:
        """Store bytes and return their key and retrieval URL.

        Raises:
            AssetStoreError: on network or provider failure.
        """

    @abstractmethod
    async def destroy(self, remote_key: str, kind: AssetKind) -> None:
        """Delete a stored object.

        Raises:
            AssetStoreError: on network or provider failure.
        """

    @abstractmethod
    async def open_download(self, url: str) -> AssetDownload:
        """Open a streaming download of a stored object.

        Raises:
            AssetStoreError: when the object cannot be fetched.
        """

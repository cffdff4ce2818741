from typing import Dict, List, Optional

import pytest
from httpx import ASGITransport, AsyncClient

from wellness_api.core.config import Settings
from wellness_api.core.db import Database
from wellness_api.core.errors import AssetStoreError
from wellness_api.domains.content.entities import AssetKind, AssetReference
from wellness_api.infrastructure.payments.base import GatewayOrder, PaymentGateway
from wellness_api.infrastructure.storage.base import AssetDownload, RemoteAssetStore
from wellness_api.main import create_app

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
CDN_PREFIX = "https://cdn.test/"

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
PDF_BYTES = b"%PDF-1.4\n" + b"0" * 128 + b"\n%%EOF"
MP4_BYTES = b"\x00\x00\x00\x18ftypmp42" + b"\x00" * 64


class FakeAssetStore(RemoteAssetStore):
    """In-memory store that records every call in order"""

    def __init__(self):
        self.objects: Dict[str, bytes] = {}
        self.calls: List[tuple] = []
        self.downloads: List[AssetDownload] = []
        self.failing_folders: set = set()
        self.fail_destroys = False
        self._counter = 0

    @property
    def puts(self) -> List[str]:
        return [target for action, target in self.calls if action == "put"]

    @property
    def destroys(self) -> List[str]:
        return [target for action, target in self.calls if action == "destroy"]

    async def put(self, content, folder, kind, filename=None, content_type=None) -> AssetReference:
        self.calls.append(("put", folder))
        if folder in self.failing_folders:
            raise AssetStoreError(f"upload to {folder} refused")
        self._counter += 1
        key = f"{folder}/object-{self._counter}"
        self.objects[key] = content
        return AssetReference(remote_key=key, url=f"{CDN_PREFIX}{key}")

    async def destroy(self, remote_key: str, kind: AssetKind) -> None:
        self.calls.append(("destroy", remote_key))
        if self.fail_destroys:
            raise AssetStoreError(f"destroy of {remote_key} refused")
        self.objects.pop(remote_key, None)

    async def open_download(self, url: str) -> AssetDownload:
        key = url[len(CDN_PREFIX):]
        if key not in self.objects:
            raise AssetStoreError(f"{url} not found", status_code=404)
        content = self.objects[key]

        async def chunks():
            for start in range(0, len(content), 32):
                yield content[start:start + 32]

        async def close():
            pass

        download = AssetDownload(chunks(), close, content_type="application/pdf", content_length=len(content))
        self.downloads.append(download)
        return download


class FakePaymentGateway(PaymentGateway):
    """Gateway double that remembers created orders"""

    def __init__(self, secret: str = "webhook-secret"):
        self.secret = secret
        self.created: List[dict] = []
        self.orders: Dict[str, GatewayOrder] = {}

    @property
    def webhook_secret(self) -> str:
        return self.secret

    async def create_order(self, payload: dict) -> GatewayOrder:
        self.created.append(payload)
        order = GatewayOrder(
            order_id=payload["order_id"],
            gateway_order_id=f"cf_{len(self.created)}",
            payment_session_id=f"session_{len(self.created)}",
            order_status="ACTIVE",
            order_tags=payload.get("order_tags", {}),
            raw={"order_id": payload["order_id"], "order_status": "ACTIVE"},
        )
        self.orders[order.order_id] = order
        return order

    async def get_order(self, order_id: str) -> GatewayOrder:
        return self.orders[order_id]


def image_file(name: str = "thumb.png"):
    return (name, PNG_BYTES, "image/png")


def pdf_file(name: str = "book.pdf"):
    return (name, PDF_BYTES, "application/pdf")


def video_file(name: str = "episode.mp4"):
    return (name, MP4_BYTES, "video/mp4")


def make_settings(**overrides) -> Settings:
    values = {"database_url": TEST_DATABASE_URL, "environment": "test", "log_level": "warning"}
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
async def database():
    database = Database(TEST_DATABASE_URL)
    await database.create_all()
    yield database
    await database.dispose()


@pytest.fixture
async def session(database):
    async with database.session_factory() as session:
        yield session


@pytest.fixture
def asset_store() -> FakeAssetStore:
    return FakeAssetStore()


@pytest.fixture
def payment_gateway() -> FakePaymentGateway:
    return FakePaymentGateway()


@pytest.fixture
def app(settings, database, asset_store, payment_gateway):
    return create_app(settings, database=database, asset_store=asset_store, payment_gateway=payment_gateway)


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def create_ebook(client: AsyncClient, title: str = "Mind & Body", headers: Optional[dict] = None, **fields):
    data = {"title": title, "description": "A guide", "price": "499", "pages": "120", "category": "wellness"}
    data.update(fields)
    return await client.post(
        "/api/ebooks",
        data=data,
        files={"thumbnail_file": image_file(), "pdf_file": pdf_file()},
        headers=headers,
    )

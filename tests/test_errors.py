import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from wellness_api.api.errors import STATUS_BY_KIND, format_validation_errors, register_exception_handlers, status_for
from wellness_api.core.errors import (
    AssetUploadFailed,
    DuplicateSlugError,
    ErrorKind,
    NotFoundError,
    SlugResolutionFailed,
)
from tests.conftest import make_settings


def build_app(environment: str) -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app, make_settings(environment=environment))

    @app.get("/missing")
    async def missing():
        raise NotFoundError("Nothing here")

    @app.get("/duplicate")
    async def duplicate():
        raise DuplicateSlugError("yoga-basics", "ebook")

    @app.get("/upload")
    async def upload():
        raise AssetUploadFailed("pdf", "timeout")

    @app.get("/exhausted")
    async def exhausted():
        raise SlugResolutionFailed("yoga", 1000)

    @app.get("/database")
    async def database():
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    @app.get("/crash")
    async def crash():
        raise RuntimeError("boom")

    return app


async def call(environment: str, path: str):
    transport = ASGITransport(app=build_app(environment), raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.get(path)


def test_every_kind_has_a_status():
    assert set(STATUS_BY_KIND) == set(ErrorKind)
    assert status_for(ErrorKind.VALIDATION) == 400
    assert status_for(ErrorKind.DUPLICATE_SLUG) == 400
    assert status_for(ErrorKind.NOT_FOUND) == 404
    assert status_for(ErrorKind.ASSET_UPLOAD_FAILED) == 502
    assert status_for(ErrorKind.STORE_UNAVAILABLE) == 500


def test_format_validation_errors():
    errors = [
        {"loc": ("body", "price"), "msg": "Input should be greater than or equal to 0"},
        {"loc": ("customer", "email"), "msg": "value is not a valid email address"},
    ]
    assert format_validation_errors(errors) == (
        "price: Input should be greater than or equal to 0, customer.email: value is not a valid email address"
    )
    assert format_validation_errors([]) == "Invalid request"


@pytest.mark.parametrize("path, status_code", [
    ("/missing", 404),
    ("/duplicate", 400),
    ("/upload", 502),
    ("/exhausted", 500),
    ("/database", 500),
    ("/crash", 500),
])
async def test_status_mapping(path, status_code):
    response = await call("production", path)

    assert response.status_code == status_code
    body = response.json()
    assert body["success"] is False
    assert "stack" not in body


async def test_unhandled_error_hides_details():
    response = await call("production", "/crash")
    assert response.json() == {"success": False, "error": "Server Error"}


async def test_database_errors_are_reported_as_unavailable():
    response = await call("production", "/database")
    assert response.json()["error"] == "Database is unavailable. Please try again later."


async def test_development_adds_stack_to_server_errors():
    crash = (await call("development", "/crash")).json()
    missing = (await call("development", "/missing")).json()

    assert "RuntimeError: boom" in crash["stack"]
    assert "stack" not in missing


async def test_unknown_route_uses_envelope():
    response = await call("production", "/nowhere")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Not Found"}

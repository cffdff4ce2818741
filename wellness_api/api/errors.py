"""Single translation point from service errors to HTTP responses."""

import logging
import traceback
from typing import Iterable

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import InterfaceError, OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

from wellness_api.api.responses import failure
from wellness_api.core.config import Settings
from wellness_api.core.errors import ErrorKind, ServiceError, StoreUnavailable

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.DUPLICATE_SLUG: status.HTTP_400_BAD_REQUEST,
    ErrorKind.ASSET_UPLOAD_FAILED: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.STORE_UNAVAILABLE: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.UPSTREAM_FAILED: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(kind: ErrorKind) -> int:
    return STATUS_BY_KIND.get(kind, status.HTTP_500_INTERNAL_SERVER_ERROR)


def format_validation_errors(errors: Iterable[dict]) -> str:
    """Join pydantic error entries as ``field: message, field: message``"""
    messages = []
    for error in errors:
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        message = error.get("msg", "Invalid value")
        messages.append(f"{'.'.join(location)}: {message}" if location else message)
    return ", ".join(messages) or "Invalid request"


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:

    def stack_for(exc: BaseException, status_code: int):
        if settings.is_development and status_code >= 500:
            return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        return None

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        status_code = status_for(exc.kind)
        if status_code >= 500:
            logger.error("%s %s failed (%s): %s", request.method, request.url.path, exc.kind.value, exc.message)
        else:
            logger.info("%s %s rejected (%s): %s", request.method, request.url.path, exc.kind.value, exc.message)
        return failure(exc.message, status_code, stack_for(exc, status_code))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return failure(format_validation_errors(exc.errors()), status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(PydanticValidationError)
    async def pydantic_validation_handler(request: Request, exc: PydanticValidationError):
        return failure(format_validation_errors(exc.errors()), status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return failure(str(exc.detail), exc.status_code)

    @app.exception_handler(OperationalError)
    @app.exception_handler(InterfaceError)
    async def database_unavailable_handler(request: Request, exc: Exception):
        logger.error("Database unavailable during %s %s: %s", request.method, request.url.path, exc)
        error = StoreUnavailable("Database is unavailable. Please try again later.")
        return failure(error.message, status_for(error.kind), stack_for(exc, status.HTTP_500_INTERNAL_SERVER_ERROR))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error during %s %s", request.method, request.url.path)
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        return failure("Server Error", status_code, stack_for(exc, status_code))

"""Typed error hierarchy shared by the domain services.

Every error the services raise carries an :class:`ErrorKind`. The HTTP layer
translates kinds to status codes in one place (``wellness_api.api.errors``),
so nothing below the routers knows about HTTP.
"""

import enum
from typing import Optional


class ErrorKind(str, enum.Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    DUPLICATE_SLUG = "duplicate_slug"
    ASSET_UPLOAD_FAILED = "asset_upload_failed"
    STORE_UNAVAILABLE = "store_unavailable"
    UPSTREAM_FAILED = "upstream_failed"
    UNAUTHORIZED = "unauthorized"
    INTERNAL = "internal"


class ServiceError(Exception):
    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    kind = ErrorKind.VALIDATION


class EmptySlugDerived(ValidationError):
    def __init__(self, title: str):
        super().__init__(f"Title '{title}' must contain at least one letter or digit.")
        self.title = title


class RequiredAssetMissing(ValidationError):
    def __init__(self, slot: str, label: str):
        super().__init__(f"{label} is required.")
        self.slot = slot


class NotFoundError(ServiceError):
    kind = ErrorKind.NOT_FOUND


class DuplicateSlugError(ServiceError):
    kind = ErrorKind.DUPLICATE_SLUG

    def __init__(self, slug: str, label: str = "document"):
        super().__init__(
            f"A {label} with this title (or resulting slug '{slug}') already exists. "
            "Please choose a different title."
        )
        self.slug = slug


class SlugResolutionFailed(ServiceError):
    kind = ErrorKind.INTERNAL

    def __init__(self, base_slug: str, attempts: int):
        super().__init__(f"Could not find a free slug for '{base_slug}' after {attempts} attempts.")
        self.base_slug = base_slug
        self.attempts = attempts


class AssetStoreError(Exception):
    """Raised by a remote asset store when the provider call fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AssetUploadFailed(ServiceError):
    kind = ErrorKind.ASSET_UPLOAD_FAILED

    def __init__(self, slot: str, reason: str):
        super().__init__(f"Failed to upload '{slot}' to the asset store: {reason}")
        self.slot = slot
        self.reason = reason


class AssetDownloadFailed(ServiceError):
    kind = ErrorKind.UPSTREAM_FAILED


class StoreUnavailable(ServiceError):
    kind = ErrorKind.STORE_UNAVAILABLE


class PaymentGatewayError(ServiceError):
    kind = ErrorKind.UPSTREAM_FAILED

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class UnauthorizedError(ServiceError):
    kind = ErrorKind.UNAUTHORIZED

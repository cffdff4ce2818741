"""Routes shared by every slugged content collection.

Each collection module creates its own ``APIRouter``, registers the routes
specific to it, and then calls :func:`add_content_routes` so that fixed
paths such as ``/featured`` are matched before ``/{slug}``.
"""

import logging
import uuid
from typing import Any, Dict, Optional, Set, Tuple

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import StreamingResponse
from starlette.datastructures import UploadFile

from wellness_api.api.dependencies import content_service
from wellness_api.api.responses import pagination, success
from wellness_api.core.auth import require_admin
from wellness_api.core.errors import AssetDownloadFailed, AssetStoreError, NotFoundError, ValidationError
from wellness_api.domains.content.entities import AssetKind, UploadedAsset
from wellness_api.domains.content.registry import ContentType, dump_document
from wellness_api.domains.content.services import ContentService
from wellness_api.domains.content.slugs import slugify

logger = logging.getLogger(__name__)

TRUTHY = {"true", "1", "yes", "on"}

DOWNLOAD_DEFAULTS = {
    AssetKind.RAW: ("pdf", "application/pdf"),
    AssetKind.VIDEO: ("mp4", "video/mp4"),
    AssetKind.IMAGE: ("jpg", "image/jpeg"),
}


def _is_truthy(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUTHY


async def read_submission(
    request: Request, content_type: ContentType
) -> Tuple[Dict[str, Any], Dict[str, UploadedAsset], Set[str]]:
    """Split a create/update body into scalar fields, files and cleared slots.

    Accepts JSON (no files) as well as multipart or url-encoded forms. Files
    arrive as ``<slot>_file`` and clears as ``clear_<slot>=true``.
    """
    files: Dict[str, UploadedAsset] = {}
    clears: Set[str] = set()

    if request.headers.get("content-type", "").startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            raise ValidationError("Request body is not valid JSON.")
        if not isinstance(body, dict):
            raise ValidationError("Request body must be a JSON object.")
        fields = dict(body)
    else:
        form = await request.form()
        fields = {}
        for key in set(form.keys()):
            values = form.getlist(key)
            fields[key] = values if len(values) > 1 else values[0]

    for slot in content_type.slots:
        upload = fields.pop(slot.form_field, None)
        if isinstance(upload, UploadFile) and upload.filename:
            files[slot.name] = UploadedAsset(
                content=await upload.read(),
                filename=upload.filename,
                content_type=upload.content_type or "application/octet-stream",
            )
        if _is_truthy(fields.pop(slot.clear_field, False)):
            clears.add(slot.name)

    # any other file parts are not ours to store
    fields = {key: value for key, value in fields.items() if not isinstance(value, UploadFile)}
    return fields, files, clears


def add_content_routes(
    router: APIRouter,
    content_type: ContentType,
    *,
    list_route: bool = True,
    slug_route: bool = True,
) -> None:
    """Register list, get by id or slug, create, update and delete"""
    get_service = content_service(content_type)
    has_category = "category" in content_type.filter_fields

    if list_route:
        @router.get("")
        async def list_documents(
            page: int = Query(1, ge=1),
            limit: Optional[int] = Query(None, ge=1, le=100),
            search: Optional[str] = Query(None),
            category: Optional[str] = Query(None),
            service: ContentService = Depends(get_service),
        ):
            filters = {"category": category} if has_category and category and category != "all" else None
            limit = limit or content_type.default_page_size
            documents, total = await service.list(page=page, limit=limit, search=search, filters=filters)
            categories = await service.repository.distinct("category") if content_type.list_categories else None
            return success(
                [dump_document(content_type, document, summary=True) for document in documents],
                count=len(documents),
                total=total,
                pagination=pagination(page, limit, total),
                categories=categories,
            )

    @router.get("/id/{document_id}")
    async def get_document_by_id(document_id: uuid.UUID, service: ContentService = Depends(get_service)):
        document = await service.get_by_id(document_id)
        return success(dump_document(content_type, document))

    if slug_route:
        @router.get("/{slug}")
        async def get_document_by_slug(slug: str, service: ContentService = Depends(get_service)):
            document = await service.get_by_slug(slug)
            return success(dump_document(content_type, document))

    @router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)])
    async def create_document(request: Request, service: ContentService = Depends(get_service)):
        fields, files, _ = await read_submission(request, content_type)
        data = content_type.create_schema.model_validate(fields)
        document = await service.create(data, files)
        return success(dump_document(content_type, document), status_code=status.HTTP_201_CREATED)

    @router.put("/{document_id}", dependencies=[Depends(require_admin)])
    async def update_document(
        document_id: uuid.UUID, request: Request, service: ContentService = Depends(get_service)
    ):
        fields, files, clears = await read_submission(request, content_type)
        data = content_type.update_schema.model_validate(fields)
        document = await service.update(document_id, data, files, clears)
        return success(dump_document(content_type, document))

    @router.delete("/{document_id}", dependencies=[Depends(require_admin)])
    async def delete_document(document_id: uuid.UUID, service: ContentService = Depends(get_service)):
        await service.delete(document_id)
        return success({}, message=f"{content_type.label} deleted")


def add_download_route(router: APIRouter, content_type: ContentType, slot_name: str) -> None:
    """Stream a stored file through the API as an attachment"""
    get_service = content_service(content_type)
    slot = content_type.slot(slot_name)

    @router.get("/download/{document_id}")
    async def download_document_file(
        document_id: uuid.UUID, request: Request, service: ContentService = Depends(get_service)
    ):
        document = await service.get_by_id(document_id)
        reference = slot.read(document)
        if reference is None or not reference.url:
            raise NotFoundError(f"{content_type.label} {slot.label} not found or its URL is missing.")

        try:
            download = await request.app.state.asset_store.open_download(reference.url)
        except AssetStoreError as e:
            logger.error("Fetching %s for %s %s failed: %s", slot.name, content_type.label, document.id, e)
            raise AssetDownloadFailed(f"Failed to fetch {slot.label} from storage provider.") from e

        extension, default_media_type = DOWNLOAD_DEFAULTS[slot.kind]
        filename = f"{slugify(document.title, max_len=60).replace('-', '_') or slot.name}.{extension}"

        async def stream():
            try:
                async for chunk in download:
                    if await request.is_disconnected():
                        logger.info("Client closed connection, aborted download for %s", document.id)
                        break
                    yield chunk
            finally:
                await download.aclose()

        headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
        if download.content_length is not None:
            headers["Content-Length"] = str(download.content_length)
        return StreamingResponse(
            stream(),
            media_type=download.content_type or default_media_type,
            headers=headers,
        )
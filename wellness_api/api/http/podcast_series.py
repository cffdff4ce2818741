import uuid

from fastapi import APIRouter, Depends

from wellness_api.api.dependencies import content_service
from wellness_api.api.http.content import add_content_routes
from wellness_api.api.responses import success
from wellness_api.core.errors import NotFoundError
from wellness_api.domains.content.registry import PODCAST_SERIES, dump_document
from wellness_api.domains.content.services import ContentService

router = APIRouter(prefix="/podcast-series", tags=["podcast-series"])

add_content_routes(router, PODCAST_SERIES, slug_route=False)


@router.get("/{identifier}")
async def get_podcast_series(identifier: str, service: ContentService = Depends(content_service(PODCAST_SERIES))):
    """Look a series up by slug first, then by id"""
    series = await service.repository.get_by_slug(identifier)
    if series is None:
        try:
            series_id = uuid.UUID(identifier)
        except ValueError:
            raise NotFoundError("Podcast series not found")
        series = await service.get_by_id(series_id)
    return success(dump_document(PODCAST_SERIES, series))

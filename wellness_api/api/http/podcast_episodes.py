import uuid

from fastapi import APIRouter, Depends

from wellness_api.api.dependencies import content_service
from wellness_api.api.http.content import add_content_routes
from wellness_api.api.responses import success
from wellness_api.domains.content.registry import PODCAST_EPISODES, dump_document
from wellness_api.domains.content.services import ContentService

router = APIRouter(prefix="/podcast-episodes", tags=["podcast-episodes"])


@router.get("/series/{series_id}")
async def get_episodes_by_series(
    series_id: uuid.UUID, service: ContentService = Depends(content_service(PODCAST_EPISODES))
):
    """Episodes of one podcast series, in episode order"""
    episodes = await service.children(series_id)
    return success([dump_document(PODCAST_EPISODES, episode) for episode in episodes], count=len(episodes))


add_content_routes(router, PODCAST_EPISODES)

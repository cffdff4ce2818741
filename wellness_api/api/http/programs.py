import uuid

from fastapi import APIRouter, Depends

from wellness_api.api.dependencies import content_service
from wellness_api.api.http.content import add_content_routes
from wellness_api.api.responses import success
from wellness_api.domains.content.registry import PROGRAMS, dump_document
from wellness_api.domains.content.services import ContentService

router = APIRouter(prefix="/programs", tags=["programs"])


@router.get("/series/{series_id}")
async def get_programs_by_series(series_id: uuid.UUID, service: ContentService = Depends(content_service(PROGRAMS))):
    """Programs of one series, in episode order"""
    programs = await service.children(series_id)
    return success([dump_document(PROGRAMS, program) for program in programs], count=len(programs))


add_content_routes(router, PROGRAMS)

from fastapi import APIRouter

from wellness_api.api.http.content import add_content_routes
from wellness_api.domains.content.registry import PROGRAM_SERIES

router = APIRouter(prefix="/program-series", tags=["program-series"])

add_content_routes(router, PROGRAM_SERIES)

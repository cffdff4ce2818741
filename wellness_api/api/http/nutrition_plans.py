from fastapi import APIRouter

from wellness_api.api.http.content import add_content_routes, add_download_route
from wellness_api.domains.content.registry import NUTRITION_PLANS

router = APIRouter(prefix="/nutrition-plans", tags=["nutrition-plans"])

add_download_route(router, NUTRITION_PLANS, "pdf")
add_content_routes(router, NUTRITION_PLANS)

from fastapi import APIRouter

from wellness_api.api.http.content import add_content_routes, add_download_route
from wellness_api.domains.content.registry import EBOOKS

router = APIRouter(prefix="/ebooks", tags=["ebooks"])

add_download_route(router, EBOOKS, "pdf")
add_content_routes(router, EBOOKS)

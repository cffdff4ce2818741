from fastapi import APIRouter

from wellness_api.api.http import (
    appointments_router,
    blogs_router,
    ebooks_router,
    health_router,
    nutrition_plans_router,
    payments_router,
    podcast_episodes_router,
    podcast_series_router,
    program_series_router,
    programs_router,
    settings_router,
)

api_router = APIRouter(prefix="/api")
api_router.include_router(health_router)
api_router.include_router(ebooks_router)
api_router.include_router(nutrition_plans_router)
api_router.include_router(program_series_router)
api_router.include_router(programs_router)
api_router.include_router(podcast_series_router)
api_router.include_router(podcast_episodes_router)
api_router.include_router(blogs_router)
api_router.include_router(appointments_router)
api_router.include_router(settings_router)
api_router.include_router(payments_router)

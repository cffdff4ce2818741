from wellness_api.api.http.appointments import router as appointments_router
from wellness_api.api.http.blogs import router as blogs_router
from wellness_api.api.http.ebooks import router as ebooks_router
from wellness_api.api.http.health import router as health_router
from wellness_api.api.http.nutrition_plans import router as nutrition_plans_router
from wellness_api.api.http.payments import router as payments_router
from wellness_api.api.http.podcast_episodes import router as podcast_episodes_router
from wellness_api.api.http.podcast_series import router as podcast_series_router
from wellness_api.api.http.program_series import router as program_series_router
from wellness_api.api.http.programs import router as programs_router
from wellness_api.api.http.settings import router as settings_router

__all__ = [
    "appointments_router",
    "blogs_router",
    "ebooks_router",
    "health_router",
    "nutrition_plans_router",
    "payments_router",
    "podcast_episodes_router",
    "podcast_series_router",
    "program_series_router",
    "programs_router",
    "settings_router",
]

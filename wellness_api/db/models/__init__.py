from wellness_api.db.models.appointment import Appointment
from wellness_api.db.models.blog import BlogPost
from wellness_api.db.models.ebook import Ebook
from wellness_api.db.models.nutrition_plan import NutritionPlan
from wellness_api.db.models.payment import Payment
from wellness_api.db.models.podcast import PodcastEpisode, PodcastSeries
from wellness_api.db.models.program import Program, ProgramSeries
from wellness_api.db.models.setting import Setting

__all__ = [
    "Appointment",
    "BlogPost",
    "Ebook",
    "NutritionPlan",
    "Payment",
    "PodcastEpisode",
    "PodcastSeries",
    "Program",
    "ProgramSeries",
    "Setting",
]

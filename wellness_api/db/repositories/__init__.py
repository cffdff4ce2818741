from wellness_api.db.repositories.appointment_repository import AppointmentRepository
from wellness_api.db.repositories.base import BaseRepository
from wellness_api.db.repositories.content_repository import ContentRepository
from wellness_api.db.repositories.payment_repository import PaymentRepository
from wellness_api.db.repositories.setting_repository import SettingRepository

__all__ = [
    "AppointmentRepository",
    "BaseRepository",
    "ContentRepository",
    "PaymentRepository",
    "SettingRepository",
]

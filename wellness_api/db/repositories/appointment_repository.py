from sqlalchemy.ext.asyncio import AsyncSession

from wellness_api.db.models.appointment import Appointment
from wellness_api.db.repositories.base import BaseRepository


class AppointmentRepository(BaseRepository[Appointment]):

    def __init__(self, session: AsyncSession):
        super().__init__(session, Appointment)

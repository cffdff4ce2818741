import logging
import uuid
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from wellness_api.core.errors import NotFoundError
from wellness_api.db.models.appointment import Appointment
from wellness_api.db.repositories.appointment_repository import AppointmentRepository
from wellness_api.domains.appointments.schemas import AppointmentCreate

logger = logging.getLogger(__name__)


class AppointmentService:
    """Consultation bookings"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.repository = AppointmentRepository(session)

    async def create(self, data: AppointmentCreate) -> Appointment:
        appointment = await self.repository.add(Appointment(id=uuid.uuid4(), **data.model_dump()))
        logger.info("New appointment request %s (%s)", appointment.id, appointment.consultation_mode)
        return appointment

    async def list(self) -> List[Appointment]:
        """All appointments, newest first"""
        appointments, _ = await self.repository.list()
        return appointments

    async def get(self, appointment_id: uuid.UUID) -> Appointment:
        appointment = await self.repository.get_by_id(appointment_id)
        if appointment is None:
            raise NotFoundError("Appointment not found")
        return appointment

    async def update_status(self, appointment_id: uuid.UUID, status: str) -> Appointment:
        appointment = await self.get(appointment_id)
        appointment.status = status
        return await self.repository.add(appointment)

    async def delete(self, appointment_id: uuid.UUID) -> None:
        appointment = await self.get(appointment_id)
        await self.repository.delete(appointment)

import uuid

from fastapi import APIRouter, Depends, status

from wellness_api.api.dependencies import get_appointment_service
from wellness_api.api.responses import success
from wellness_api.core.auth import require_admin
from wellness_api.domains.appointments.schemas import AppointmentCreate, AppointmentRead, AppointmentStatusUpdate
from wellness_api.domains.appointments.services import AppointmentService

router = APIRouter(prefix="/appointments", tags=["appointments"])


def _dump(appointment) -> dict:
    return AppointmentRead.model_validate(appointment).model_dump(mode="json")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_appointment(
    appointment_data: AppointmentCreate,
    service: AppointmentService = Depends(get_appointment_service),
):
    """Book a consultation (public)"""
    appointment = await service.create(appointment_data)
    return success(_dump(appointment), status_code=status.HTTP_201_CREATED)


@router.get("", dependencies=[Depends(require_admin)])
async def list_appointments(service: AppointmentService = Depends(get_appointment_service)):
    appointments = await service.list()
    return success([_dump(appointment) for appointment in appointments], count=len(appointments))


@router.get("/{appointment_id}", dependencies=[Depends(require_admin)])
async def get_appointment(appointment_id: uuid.UUID, service: AppointmentService = Depends(get_appointment_service)):
    return success(_dump(await service.get(appointment_id)))


@router.put("/{appointment_id}/status", dependencies=[Depends(require_admin)])
async def update_appointment_status(
    appointment_id: uuid.UUID,
    status_data: AppointmentStatusUpdate,
    service: AppointmentService = Depends(get_appointment_service),
):
    appointment = await service.update_status(appointment_id, status_data.status)
    return success(_dump(appointment))


@router.delete("/{appointment_id}", dependencies=[Depends(require_admin)])
async def delete_appointment(appointment_id: uuid.UUID, service: AppointmentService = Depends(get_appointment_service)):
    await service.delete(appointment_id)
    return success(message="Appointment removed")

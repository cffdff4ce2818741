import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

Gender = Literal["Male", "Female", "Other"]
ConsultationMode = Literal["Online", "Offline (In-Clinic)"]
AppointmentStatus = Literal["New", "Contacted", "Completed", "Cancelled"]


class AppointmentCreate(BaseModel):
    """Booking request submitted from the public site"""
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=50)
    age: int = Field(..., ge=0, le=150)
    gender: Gender
    city: str = Field(..., min_length=1, max_length=255)
    consultation_mode: ConsultationMode
    message: str = Field(..., min_length=1)

    @field_validator("name", "phone", "city", "message")
    @classmethod
    def strip_text(cls, v):
        if not v.strip():
            raise ValueError("Field cannot be empty")
        return v.strip()

    @field_validator("email")
    @classmethod
    def lower_email(cls, v):
        return v.lower()


class AppointmentStatusUpdate(BaseModel):
    status: AppointmentStatus


class AppointmentRead(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    phone: str
    age: int
    gender: str
    city: str
    consultation_mode: str
    message: str
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

from sqlalchemy import Column, Integer, String, Text

from wellness_api.db.models.base import BaseModel


class Appointment(BaseModel):
    __tablename__ = "appointments"

    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)
    age = Column(Integer, nullable=False)
    gender = Column(String(20), nullable=False)
    city = Column(String(255), nullable=False)
    consultation_mode = Column(String(50), nullable=False)
    message = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default="New")

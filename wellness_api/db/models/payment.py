from sqlalchemy import JSON, Column, DateTime, Float, String, Uuid

from wellness_api.db.models.base import BaseModel


class Payment(BaseModel):
    __tablename__ = "payments"

    order_id = Column(String(100), unique=True, index=True, nullable=False)
    gateway_order_id = Column(String(100), nullable=True)
    item_type = Column(String(50), nullable=False)
    item_id = Column(Uuid, nullable=False)
    amount = Column(Float, nullable=False)
    currency = Column(String(10), nullable=False, default="INR")
    status = Column(String(20), nullable=False, default="created")
    customer_id = Column(String(100))
    customer_name = Column(String(255))
    customer_email = Column(String(255))
    customer_phone = Column(String(50))
    gateway_payload = Column(JSON)
    fulfilled_at = Column(DateTime(timezone=True))

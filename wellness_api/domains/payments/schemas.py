import uuid
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, EmailStr, Field

ItemType = Literal["ebook", "nutritionPlan"]


class CustomerDetails(BaseModel):
    id: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=50)
    name: Optional[str] = Field(None, max_length=255)


class CreateOrderRequest(BaseModel):
    amount: float = Field(..., gt=0)
    currency: str = Field("INR", min_length=3, max_length=3)
    item_type: ItemType
    item_id: uuid.UUID
    customer: CustomerDetails


class CreateOrderResponse(BaseModel):
    order_id: str
    gateway_order_id: Optional[str] = None
    payment_session_id: Optional[str] = None


class OrderStatusResponse(BaseModel):
    order_id: str
    status: Optional[str] = None
    item_type: Optional[str] = None
    item_id: Optional[str] = None
    item_slug: Optional[str] = None
    order_data: Dict[str, Any] = {}

"""One-time purchases of ebooks and nutrition plans through the payment gateway."""

import json
import logging
import re
import time
import uuid
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from wellness_api.core.config import Settings
from wellness_api.core.errors import NotFoundError, UnauthorizedError, ValidationError
from wellness_api.core.security import verify_webhook_signature
from wellness_api.db.models.base import utcnow
from wellness_api.db.models.payment import Payment
from wellness_api.db.repositories.content_repository import ContentRepository
from wellness_api.db.repositories.payment_repository import PaymentRepository
from wellness_api.domains.content.registry import EBOOKS, NUTRITION_PLANS
from wellness_api.domains.payments.fulfillment import FulfillmentRegistry
from wellness_api.domains.payments.schemas import CreateOrderRequest, CreateOrderResponse, OrderStatusResponse
from wellness_api.infrastructure.payments.base import PaymentGateway

logger = logging.getLogger(__name__)

PURCHASABLE = {
    "ebook": EBOOKS,
    "nutritionPlan": NUTRITION_PLANS,
}

FAILED_STATUSES = {"FAILED", "USER_DROPPED", "VOID", "CANCELLED", "EXPIRED", "ERROR"}


def build_order_id(slug: str, now_ms: Optional[int] = None) -> str:
    """ORDER_<first 10 alphanumerics of the slug>_<epoch millis>"""
    prefix = re.sub(r"[^a-zA-Z0-9]", "", slug or "")[:10] or "item"
    return f"ORDER_{prefix}_{now_ms if now_ms is not None else int(time.time() * 1000)}"


class PaymentService:

    def __init__(
        self,
        session: AsyncSession,
        gateway: PaymentGateway,
        settings: Settings,
        fulfillment: FulfillmentRegistry,
    ):
        self.session = session
        self.gateway = gateway
        self.settings = settings
        self.fulfillment = fulfillment
        self.repository = PaymentRepository(session)

    async def create_order(self, request: CreateOrderRequest) -> CreateOrderResponse:
        """Check the item and price, open a gateway order and record it"""
        content_type = PURCHASABLE[request.item_type]
        item = await ContentRepository(self.session, content_type.model).get_by_id(request.item_id)
        if item is None:
            raise NotFoundError(f"{content_type.label} with ID {request.item_id} not found.")

        if float(request.amount) != float(item.price):
            logger.warning(
                "Price mismatch for %s %s: sent %s, expected %s",
                request.item_type, item.id, request.amount, item.price,
            )
            raise ValidationError(f"Price mismatch. Expected {item.price:g} INR for {item.title}.")

        order_id = build_order_id(item.slug)
        customer = request.customer
        payload = {
            "order_id": order_id,
            "order_amount": float(request.amount),
            "order_currency": request.currency.upper(),
            "customer_details": {
                "customer_id": customer.id,
                "customer_email": customer.email,
                "customer_phone": customer.phone,
                "customer_name": customer.name,
            },
            "order_meta": {
                "return_url": f"{self.settings.frontend_url.rstrip('/')}/payment-status?order_id={{order_id}}",
                "notify_url": f"{self.settings.backend_public_url.rstrip('/')}/api/payment/webhook",
            },
            "order_note": f"{content_type.label} Purchase: {item.title} (ID: {item.id})",
            "order_tags": {
                "itemId": str(item.id),
                "itemType": request.item_type,
                "itemSlug": item.slug,
            },
        }
        if customer.name is None:
            del payload["customer_details"]["customer_name"]

        gateway_order = await self.gateway.create_order(payload)

        await self.repository.add(Payment(
            id=uuid.uuid4(),
            order_id=order_id,
            gateway_order_id=gateway_order.gateway_order_id,
            item_type=request.item_type,
            item_id=item.id,
            amount=float(request.amount),
            currency=request.currency.upper(),
            status="created",
            customer_id=customer.id,
            customer_name=customer.name,
            customer_email=customer.email,
            customer_phone=customer.phone,
        ))

        return CreateOrderResponse(
            order_id=order_id,
            gateway_order_id=gateway_order.gateway_order_id,
            payment_session_id=gateway_order.payment_session_id,
        )

    async def handle_webhook(self, raw_body: bytes, timestamp: Optional[str], signature: Optional[str]) -> None:
        """Verify and apply a gateway notification.

        Raises:
            UnauthorizedError: the signature is missing or does not match.
            ValidationError: the verified body is not JSON.
        """
        if not verify_webhook_signature(self.gateway.webhook_secret, timestamp, raw_body, signature):
            logger.warning("Rejected webhook with missing or invalid signature")
            raise UnauthorizedError("Invalid webhook signature.")

        try:
            body = json.loads(raw_body)
        except ValueError as e:
            raise ValidationError("Webhook body is not valid JSON.") from e

        if not isinstance(body, dict):
            body = {}
        data = body.get("data")
        order = data.get("order") if isinstance(data, dict) else None
        if not isinstance(order, dict):
            order = {}
        order_id = order.get("order_id")
        order_status = order.get("order_status")
        if not order_id or not order_status or not isinstance(order_id, str):
            logger.warning("Webhook without order id or status (type=%s)", body.get("type"))
            return

        payment = await self.repository.get_by_order_id(order_id)
        if payment is None:
            logger.warning("Webhook for unknown order %s (%s)", order_id, order_status)
            return

        payment.gateway_payload = body
        if order_status == "PAID":
            await self._mark_paid(payment)
        elif order_status in FAILED_STATUSES:
            logger.info("Order %s ended with status %s", order_id, order_status)
            payment.status = "failed"
            await self.repository.add(payment)
        else:
            logger.info("Order %s status update: %s", order_id, order_status)
            await self.repository.add(payment)

    async def _mark_paid(self, payment: Payment) -> None:
        if payment.fulfilled_at is not None:
            logger.info("Order %s already fulfilled, ignoring repeated notification", payment.order_id)
            await self.repository.add(payment)
            return

        # a handler failure leaves fulfilled_at unset so the next delivery retries it
        payment.status = "paid"
        await self.repository.add(payment)

        if await self.fulfillment.fulfill(payment):
            payment.fulfilled_at = utcnow()
            await self.repository.add(payment)

    async def order_status(self, order_id: str) -> OrderStatusResponse:
        order = await self.gateway.get_order(order_id)
        tags: Dict[str, Any] = order.order_tags or {}
        return OrderStatusResponse(
            order_id=order.order_id,
            status=order.order_status,
            item_type=tags.get("itemType"),
            item_id=tags.get("itemId"),
            item_slug=tags.get("itemSlug"),
            order_data=order.raw,
        )

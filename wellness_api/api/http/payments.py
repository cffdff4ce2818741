from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from wellness_api.api.dependencies import get_payment_service
from wellness_api.api.responses import success
from wellness_api.domains.payments.schemas import CreateOrderRequest
from wellness_api.domains.payments.services import PaymentService

router = APIRouter(prefix="/payment", tags=["payment"])


@router.post("/create-order")
async def create_order(order_request: CreateOrderRequest, service: PaymentService = Depends(get_payment_service)):
    """Open a gateway checkout session for an ebook or nutrition plan"""
    order = await service.create_order(order_request)
    return success(order.model_dump())


@router.post("/webhook")
async def payment_webhook(request: Request, service: PaymentService = Depends(get_payment_service)):
    """Gateway notification; the signature covers the raw body"""
    raw_body = await request.body()
    await service.handle_webhook(
        raw_body,
        timestamp=request.headers.get("x-webhook-timestamp"),
        signature=request.headers.get("x-webhook-signature"),
    )
    return PlainTextResponse("Webhook Acknowledged")


@router.get("/order-status/{order_id}")
async def get_order_status(order_id: str, service: PaymentService = Depends(get_payment_service)):
    order = await service.order_status(order_id)
    return success(order.model_dump())

import json
import uuid
from unittest.mock import AsyncMock

import pytest

from wellness_api.core.security import compute_webhook_signature
from wellness_api.db.repositories.payment_repository import PaymentRepository
from wellness_api.domains.payments.fulfillment import FulfillmentRegistry
from wellness_api.domains.payments.services import build_order_id
from tests.conftest import create_ebook

CUSTOMER = {"id": "cust_1", "email": "reader@mailbox.org", "phone": "9999999999", "name": "Reader"}


@pytest.fixture
def fulfill_ebook(app):
    handler = AsyncMock()
    registry = FulfillmentRegistry()
    registry.register("ebook", handler)
    app.state.fulfillment = registry
    return handler


async def place_order(client, ebook, amount=499):
    return await client.post(
        "/api/payment/create-order",
        json={"amount": amount, "item_type": "ebook", "item_id": ebook["id"], "customer": CUSTOMER},
    )


async def send_webhook(client, secret, order_id, order_status, signature=None):
    payload = {
        "type": "PAYMENT_WEBHOOK",
        "data": {"order": {"order_id": order_id, "order_status": order_status}},
    }
    return await send_signed(client, secret, payload, signature)


async def send_signed(client, secret, payload, signature=None):
    body = json.dumps(payload).encode()
    timestamp = "1700000000"
    headers = {
        "x-webhook-timestamp": timestamp,
        "x-webhook-signature": signature or compute_webhook_signature(secret, timestamp, body),
        "content-type": "application/json",
    }
    return await client.post("/api/payment/webhook", content=body, headers=headers)


async def get_payment(database, order_id):
    async with database.session_factory() as session:
        return await PaymentRepository(session).get_by_order_id(order_id)


def test_order_id_uses_slug_prefix():
    assert build_order_id("mind-body-balance-guide", now_ms=1700000000000) == "ORDER_mindbodyba_1700000000000"
    assert build_order_id("", now_ms=1) == "ORDER_item_1"


async def test_create_order(client, payment_gateway, database):
    ebook = (await create_ebook(client, "Mind & Body")).json()["data"]

    response = await place_order(client, ebook)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["payment_session_id"] == "session_1"
    assert data["gateway_order_id"] == "cf_1"
    assert data["order_id"].startswith("ORDER_mindbody_")

    payload = payment_gateway.created[0]
    assert payload["order_amount"] == 499
    assert payload["order_currency"] == "INR"
    assert payload["customer_details"]["customer_email"] == "reader@mailbox.org"
    assert payload["order_meta"]["notify_url"] == "http://localhost:8000/api/payment/webhook"
    assert payload["order_tags"] == {"itemId": ebook["id"], "itemType": "ebook", "itemSlug": "mind-body"}

    payment = await get_payment(database, data["order_id"])
    assert payment.status == "created"
    assert str(payment.item_id) == ebook["id"]


async def test_price_mismatch_is_rejected(client, payment_gateway):
    ebook = (await create_ebook(client)).json()["data"]

    response = await place_order(client, ebook, amount=1)

    assert response.status_code == 400
    assert response.json()["error"].startswith("Price mismatch")
    assert payment_gateway.created == []


async def test_unknown_item_is_404(client):
    response = await place_order(client, {"id": str(uuid.uuid4())})
    assert response.status_code == 404


async def test_invalid_order_request_is_400(client):
    response = await client.post(
        "/api/payment/create-order",
        json={"amount": 0, "item_type": "program", "item_id": "nope", "customer": {}},
    )
    assert response.status_code == 400
    assert response.json()["success"] is False


async def test_paid_webhook_marks_paid_and_fulfills_once(client, payment_gateway, database, fulfill_ebook):
    ebook = (await create_ebook(client)).json()["data"]
    order_id = (await place_order(client, ebook)).json()["data"]["order_id"]

    response = await send_webhook(client, payment_gateway.webhook_secret, order_id, "PAID")

    assert response.status_code == 200
    assert response.text == "Webhook Acknowledged"
    payment = await get_payment(database, order_id)
    assert payment.status == "paid"
    assert payment.fulfilled_at is not None
    fulfill_ebook.assert_awaited_once()

    await send_webhook(client, payment_gateway.webhook_secret, order_id, "PAID")
    fulfill_ebook.assert_awaited_once()


async def test_failed_fulfillment_is_retried_on_next_delivery(client, payment_gateway, database, fulfill_ebook):
    fulfill_ebook.side_effect = [RuntimeError("mailer down"), None]
    ebook = (await create_ebook(client)).json()["data"]
    order_id = (await place_order(client, ebook)).json()["data"]["order_id"]

    first = await send_webhook(client, payment_gateway.webhook_secret, order_id, "PAID")

    assert first.status_code == 500
    payment = await get_payment(database, order_id)
    assert payment.status == "paid"
    assert payment.fulfilled_at is None

    second = await send_webhook(client, payment_gateway.webhook_secret, order_id, "PAID")

    assert second.status_code == 200
    assert (await get_payment(database, order_id)).fulfilled_at is not None
    assert fulfill_ebook.await_count == 2

    await send_webhook(client, payment_gateway.webhook_secret, order_id, "PAID")
    assert fulfill_ebook.await_count == 2


@pytest.mark.parametrize("payload", [
    {"data": {"order": "oops"}},
    {"data": "oops"},
    {"data": {"order": {"order_id": 42, "order_status": "PAID"}}},
    ["not", "an", "object"],
])
async def test_malformed_verified_webhook_is_acknowledged(client, payment_gateway, fulfill_ebook, payload):
    response = await send_signed(client, payment_gateway.webhook_secret, payload)

    assert response.status_code == 200
    fulfill_ebook.assert_not_awaited()


async def test_failed_webhook_marks_failed(client, payment_gateway, database, fulfill_ebook):
    ebook = (await create_ebook(client)).json()["data"]
    order_id = (await place_order(client, ebook)).json()["data"]["order_id"]

    response = await send_webhook(client, payment_gateway.webhook_secret, order_id, "USER_DROPPED")

    assert response.status_code == 200
    assert (await get_payment(database, order_id)).status == "failed"
    fulfill_ebook.assert_not_awaited()


async def test_bad_signature_is_401(client, payment_gateway, database, fulfill_ebook):
    ebook = (await create_ebook(client)).json()["data"]
    order_id = (await place_order(client, ebook)).json()["data"]["order_id"]

    response = await send_webhook(client, payment_gateway.webhook_secret, order_id, "PAID", signature="forged")

    assert response.status_code == 401
    assert (await get_payment(database, order_id)).status == "created"
    fulfill_ebook.assert_not_awaited()


async def test_missing_signature_headers_are_401(client):
    response = await client.post("/api/payment/webhook", content=b"{}")
    assert response.status_code == 401


async def test_webhook_for_unknown_order_is_acknowledged(client, payment_gateway):
    response = await send_webhook(client, payment_gateway.webhook_secret, "ORDER_missing_1", "PAID")
    assert response.status_code == 200


async def test_order_status(client, payment_gateway):
    ebook = (await create_ebook(client)).json()["data"]
    order_id = (await place_order(client, ebook)).json()["data"]["order_id"]

    response = await client.get(f"/api/payment/order-status/{order_id}")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["order_id"] == order_id
    assert data["status"] == "ACTIVE"
    assert data["item_type"] == "ebook"
    assert data["item_slug"] == "mind-body"

"""Cashfree Payment Gateway client (PG API, ``/orders``)."""

import logging
from typing import Any, Dict, Optional

import httpx

from wellness_api.core.errors import PaymentGatewayError
from wellness_api.infrastructure.payments.base import GatewayOrder, PaymentGateway

logger = logging.getLogger(__name__)


class CashfreeGateway(PaymentGateway):

    def __init__(
        self,
        app_id: str,
        secret_key: str,
        base_url: str = "https://sandbox.cashfree.com/pg",
        api_version: str = "2023-08-01",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.app_id = app_id
        self.secret_key = secret_key
        self.base_url = base_url.rstrip("/")
        self.api_version = api_version
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def webhook_secret(self) -> str:
        return self.secret_key

    async def boot(self) -> None:
        """Initialise the HTTP client"""
        if not (self.app_id and self.secret_key):
            logger.warning("Cashfree App ID or Secret Key is not configured, order creation will fail")
        self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def close(self) -> None:
        """Close the HTTP client"""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _get_auth_header(self) -> Dict[str, str]:
        return {
            "x-client-id": self.app_id,
            "x-client-secret": self.secret_key,
            "x-api-version": self.api_version,
        }

    async def do_request(self, method: str, endpoint: str, json: Optional[dict] = None) -> Dict[str, Any]:
        """Send a request to the gateway and return the decoded JSON body.

        Raises:
            PaymentGatewayError: transport failure, non-2xx status or a
                body that is not JSON. The gateway's own ``message`` is
                used when it sends one.
        """
        if self._client is None:
            raise PaymentGatewayError("HTTP client not initialised. Call boot() before making requests.")

        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        try:
            response = await self._client.request(method, url, json=json, headers=self._get_auth_header())
        except httpx.HTTPError as e:
            logger.error("Request to %s failed: %s", url, e)
            raise PaymentGatewayError(f"Payment gateway request failed: {e}") from e

        if response.status_code >= 300:
            logger.error("Request to %s failed with status %d: %s", url, response.status_code, response.text)
            try:
                message = response.json().get("message")
            except ValueError:
                message = None
            raise PaymentGatewayError(
                message or f"Payment gateway returned status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise PaymentGatewayError("Payment gateway returned an invalid response") from e

    @staticmethod
    def _to_order(body: Dict[str, Any], order_id: str) -> GatewayOrder:
        return GatewayOrder(
            order_id=body.get("order_id") or order_id,
            gateway_order_id=str(body["cf_order_id"]) if body.get("cf_order_id") is not None else None,
            payment_session_id=body.get("payment_session_id"),
            order_status=body.get("order_status"),
            order_tags=body.get("order_tags") or {},
            raw=body,
        )

    async def create_order(self, payload: Dict[str, Any]) -> GatewayOrder:
        body = await self.do_request("POST", "/orders", json=payload)
        logger.info("Created gateway order %s (cf_order_id=%s)", payload.get("order_id"), body.get("cf_order_id"))
        return self._to_order(body, payload.get("order_id", ""))

    async def get_order(self, order_id: str) -> GatewayOrder:
        body = await self.do_request("GET", f"/orders/{order_id}")
        return self._to_order(body, order_id)

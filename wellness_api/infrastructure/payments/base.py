from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class GatewayOrder:
    """Order as reported back by the payment gateway"""
    order_id: str
    gateway_order_id: Optional[str] = None
    payment_session_id: Optional[str] = None
    order_status: Optional[str] = None
    order_tags: Dict[str, Any] = field(default_factory=dict)
    raw: Dict[str, Any] = field(default_factory=dict)


class PaymentGateway(ABC):
    """One-time purchase provider."""

    async def boot(self) -> None:
        """Acquire connections or other resources"""

    async def close(self) -> None:
        """Release connections or other resources"""

    @property
    @abstractmethod
    def webhook_secret(self) -> str:
        """Shared secret inbound webhooks are signed with"""

    @abstractmethod
    async def create_order(self, payload: Dict[str, Any]) -> GatewayOrder:
        """Register an order and return the checkout session for it.

        Raises:
            PaymentGatewayError: the gateway rejected the order or was unreachable.
        """

    @abstractmethod
    async def get_order(self, order_id: str) -> GatewayOrder:
        """Fetch the current state of an order by our order id.

        Raises:
            PaymentGatewayError: the gateway rejected the lookup or was unreachable.
        """

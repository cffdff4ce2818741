import logging
from typing import Awaitable, Callable, Dict

from wellness_api.db.models.payment import Payment

logger = logging.getLogger(__name__)

FulfillmentHandler = Callable[[Payment], Awaitable[None]]


class FulfillmentRegistry:
    """Callbacks run once an order of a given item type is paid"""

    def __init__(self):
        self._handlers: Dict[str, FulfillmentHandler] = {}

    def register(self, item_type: str, handler: FulfillmentHandler) -> None:
        self._handlers[item_type] = handler

    async def fulfill(self, payment: Payment) -> bool:
        """Run the handler for the payment's item type; False when none is registered"""
        handler = self._handlers.get(payment.item_type)
        if handler is None:
            logger.warning("No fulfillment registered for item type '%s' (order %s)", payment.item_type, payment.order_id)
            return False
        await handler(payment)
        return True


async def log_purchase(payment: Payment) -> None:
    logger.info(
        "Fulfilling order %s: %s %s for %s",
        payment.order_id, payment.item_type, payment.item_id, payment.customer_email,
    )


def default_fulfillment() -> FulfillmentRegistry:
    registry = FulfillmentRegistry()
    registry.register("ebook", log_purchase)
    registry.register("nutritionPlan", log_purchase)
    return registry

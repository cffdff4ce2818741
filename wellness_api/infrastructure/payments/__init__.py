from wellness_api.core.config import Settings
from wellness_api.infrastructure.payments.base import GatewayOrder, PaymentGateway
from wellness_api.infrastructure.payments.cashfree import CashfreeGateway


def build_payment_gateway(settings: Settings) -> PaymentGateway:
    return CashfreeGateway(
        app_id=settings.cashfree_app_id,
        secret_key=settings.cashfree_secret_key,
        base_url=settings.cashfree_api_base_url,
        api_version=settings.cashfree_api_version,
        timeout=settings.payment_gateway_timeout,
    )


__all__ = ["CashfreeGateway", "GatewayOrder", "PaymentGateway", "build_payment_gateway"]

"""Payment gateway service.

Routes payment operations to the configured gateway adapter.
No business logic here - only gateway coordination.
"""

from stallbook.config import settings
from stallbook.core.exceptions import GatewayUnconfigured
from stallbook.gateways.base import GatewayOrder, PaymentGateway
from stallbook.gateways.razorpay import RazorpayGateway


class GatewayService:
    """Service for managing payment gateway operations."""

    def __init__(self, gateway: PaymentGateway | None = None):
        self._gateway = gateway

    def _get_gateway(self) -> PaymentGateway:
        """Get or create the gateway instance.

        Raises:
            GatewayUnconfigured: If credentials are missing
        """
        if self._gateway is None:
            if not settings.razorpay_key_id or not settings.razorpay_key_secret:
                raise GatewayUnconfigured()
            self._gateway = RazorpayGateway(
                key_id=settings.razorpay_key_id,
                key_secret=settings.razorpay_key_secret,
            )
        return self._gateway

    @property
    def public_key(self) -> str:
        return self._get_gateway().public_key

    async def create_order(self, amount: int, currency: str, receipt: str) -> GatewayOrder:
        """Create an order via the configured gateway."""
        return await self._get_gateway().create_order(amount, currency, receipt)

    def verify_signature(self, order_id: str, payment_id: str, signature: str) -> bool:
        """Verify a checkout signature via the configured gateway."""
        return self._get_gateway().verify_signature(order_id, payment_id, signature)


# Singleton instance
gateway_service = GatewayService()

"""Base payment gateway interface.

All gateway adapters must implement this interface.
Business logic should NOT live in adapters - only gateway communication.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal


@dataclass
class GatewayOrder:
    """Order created on the gateway side, handed to the checkout widget."""

    order_id: str
    currency: str
    amount: Decimal  # major units
    receipt: str


class PaymentGateway(ABC):
    """Abstract base class for payment gateways."""

    @property
    @abstractmethod
    def public_key(self) -> str:
        """Publishable key the checkout widget is opened with."""
        pass

    @abstractmethod
    async def create_order(
        self,
        amount: int,
        currency: str,
        receipt: str,
    ) -> GatewayOrder:
        """Create an order for the customer to pay.

        Args:
            amount: Amount in smallest currency unit (paise)
            currency: Currency code (INR)
            receipt: Internal receipt reference

        Returns:
            GatewayOrder with the provider's order id

        Raises:
            GatewayError: If the provider is unreachable or rejects the order
        """
        pass

    @abstractmethod
    def verify_signature(
        self,
        order_id: str,
        payment_id: str,
        signature: str,
    ) -> bool:
        """Check the signature returned by checkout for an order/payment pair."""
        pass

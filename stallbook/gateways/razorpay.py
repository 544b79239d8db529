"""Razorpay payment gateway adapter.

Orders API: https://razorpay.com/docs/api/orders/
Checkout signature: hex HMAC-SHA256 of "<order_id>|<payment_id>" keyed with
the account's key secret.
"""

import hashlib
import hmac
import logging

import httpx

from stallbook.config import settings
from stallbook.core.exceptions import GatewayError
from stallbook.domain.pricing import from_minor_units
from stallbook.gateways.base import GatewayOrder, PaymentGateway

logger = logging.getLogger(__name__)


def compute_signature(secret: str, order_id: str, payment_id: str) -> str:
    """Lowercase hex HMAC-SHA256 over ``order_id|payment_id``."""
    payload = f"{order_id}|{payment_id}"
    return hmac.new(secret.encode(), payload.encode(), hashlib.sha256).hexdigest()


class RazorpayGateway(PaymentGateway):
    """Razorpay payment gateway implementation."""

    def __init__(
        self,
        key_id: str,
        key_secret: str,
        base_url: str | None = None,
        timeout: float | None = None,
    ):
        self.key_id = key_id
        self.key_secret = key_secret
        self.base_url = base_url or settings.razorpay_base_url
        self.timeout = timeout if timeout is not None else settings.gateway_timeout_seconds

    @property
    def public_key(self) -> str:
        return self.key_id

    async def create_order(
        self,
        amount: int,
        currency: str,
        receipt: str,
    ) -> GatewayOrder:
        """Create a Razorpay order with automatic capture."""
        payload = {
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "payment_capture": 1,
        }

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                auth=(self.key_id, self.key_secret),
                timeout=self.timeout,
            ) as client:
                response = await client.post("orders", json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.exception(
                "Razorpay rejected order for receipt %s (status %s)",
                receipt,
                e.response.status_code,
            )
            raise GatewayError() from e
        except (httpx.HTTPError, ValueError) as e:
            logger.exception("Razorpay order request failed for receipt %s", receipt)
            raise GatewayError() from e

        order_id = data.get("id")
        if not order_id:
            logger.error("Razorpay order response without id for receipt %s", receipt)
            raise GatewayError()

        return GatewayOrder(
            order_id=order_id,
            currency=data.get("currency", currency),
            amount=from_minor_units(int(data.get("amount", amount))),
            receipt=data.get("receipt", receipt),
        )

    def verify_signature(
        self,
        order_id: str,
        payment_id: str,
        signature: str,
    ) -> bool:
        """Verify the checkout signature, case-insensitively."""
        if not order_id or not payment_id or not signature:
            return False
        expected = compute_signature(self.key_secret, order_id, payment_id)
        return hmac.compare_digest(expected.encode(), signature.lower().encode())

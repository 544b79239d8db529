"""Payment-related Pydantic schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class PaymentResponse(BaseModel):
    """Schema for payment response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    booking_id: UUID
    amount: Decimal
    currency: str
    provider: str | None = None
    transaction_reference: str | None = None
    status: str
    processed_at: datetime


class CheckoutResponse(BaseModel):
    """Everything the client needs to open the gateway checkout widget."""

    booking_id: UUID
    payment_id: UUID
    key_id: str
    order_id: str
    amount: Decimal
    amount_minor: int
    currency: str
    receipt: str
    stall_name: str
    customer_name: str
    customer_email: str
    customer_phone: str | None = None


class PaymentConfirmRequest(BaseModel):
    """Schema for the checkout callback."""

    order_id: str = Field(..., min_length=1, max_length=100)
    payment_id: str = Field(..., min_length=1, max_length=100)
    signature: str = Field(..., min_length=1, max_length=256)


class PaymentConfirmResponse(BaseModel):
    """Result of a confirmed payment."""

    booking_id: UUID
    payment_id: UUID
    status: str
    booking_status: str
    transaction_reference: str | None = None
    amount: Decimal
    already_processed: bool = False

"""Payment endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends

from stallbook.api.deps import DB, CurrentUser, Customer, get_payment_service
from stallbook.schemas.payment import (
    CheckoutResponse,
    PaymentConfirmRequest,
    PaymentConfirmResponse,
    PaymentResponse,
)
from stallbook.services.payment_service import PaymentService

router = APIRouter()

Payments = Annotated[PaymentService, Depends(get_payment_service)]


@router.post("/bookings/{booking_id}/checkout", response_model=CheckoutResponse)
async def initiate_payment(
    booking_id: UUID,
    current_user: Customer,
    db: DB,
    service: Payments,
) -> CheckoutResponse:
    """Create a gateway order for a booking."""
    checkout = await service.initiate(db, booking_id, current_user.id)
    return CheckoutResponse(**checkout)


@router.post("/bookings/{booking_id}/confirm", response_model=PaymentConfirmResponse)
async def confirm_payment(
    booking_id: UUID,
    data: PaymentConfirmRequest,
    current_user: Customer,
    db: DB,
    service: Payments,
) -> PaymentConfirmResponse:
    """Verify the checkout callback and settle the booking."""
    result = await service.confirm(
        db,
        booking_id,
        data.order_id,
        data.payment_id,
        data.signature,
        customer_id=current_user.id,
    )
    return PaymentConfirmResponse(**result)


@router.get("/bookings/{booking_id}", response_model=list[PaymentResponse])
async def list_booking_payments(
    booking_id: UUID,
    current_user: CurrentUser,
    db: DB,
    service: Payments,
) -> list[PaymentResponse]:
    """List payment attempts for a booking."""
    payments = await service.list_for_booking(db, booking_id, current_user)
    return [PaymentResponse.model_validate(p) for p in payments]

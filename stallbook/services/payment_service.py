"""Payment lifecycle service.

Checkout runs in two steps:

1. ``initiate`` creates a gateway order and records (or refreshes) the
   booking's pending payment row.
2. ``confirm`` verifies the checkout signature and settles payment, booking
   and stall together: completed/approved/booked on success,
   failed/cancelled/available on failure.

The gateway call in ``initiate`` happens before anything is written, so a
gateway failure leaves the booking exactly as it was.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from stallbook.config import settings
from stallbook.core.exceptions import (
    GatewayUnconfigured,
    IneligibleError,
    NotFoundError,
    PaymentVerificationFailed,
)
from stallbook.core.permissions import ensure_authorized
from stallbook.database import utcnow
from stallbook.domain.booking_state import (
    VOIDED_BOOKING_STATUSES,
    BookingStatus,
    StallStatus,
)
from stallbook.domain.payment_state import PaymentStatus, assert_payment_transition
from stallbook.domain.pricing import calculate_amount, round_money, to_minor_units
from stallbook.models.booking import Booking
from stallbook.models.payment import Payment
from stallbook.models.stall import Stall
from stallbook.models.user import User
from stallbook.services.booking_service import release_days
from stallbook.services.gateway_service import GatewayService, gateway_service

logger = logging.getLogger(__name__)


def build_receipt(booking_id: UUID, now: datetime | None = None) -> str:
    """Receipt id sent with an order (gateway limit is 40 characters)."""
    millis = int((now or datetime.now(UTC)).timestamp() * 1000)
    return f"BK-{booking_id.hex[:16]}-{millis}"


class PaymentService:
    """Service for gateway checkout and payment settlement."""

    def __init__(self, gateway: GatewayService | None = None):
        self.gateway = gateway or gateway_service

    async def _get_booking(
        self,
        db: AsyncSession,
        booking_id: UUID,
        customer_id: UUID | None,
        for_update: bool = False,
    ) -> Booking:
        query = select(Booking).where(Booking.id == booking_id)
        if for_update:
            query = query.with_for_update()
        result = await db.execute(query)
        booking = result.scalar_one_or_none()
        if not booking or (customer_id is not None and booking.customer_id != customer_id):
            raise NotFoundError("Booking", str(booking_id))
        return booking

    async def _get_stall(self, db: AsyncSession, stall_id: UUID) -> Stall:
        stall = await db.get(Stall, stall_id)
        if not stall:
            raise NotFoundError("Stall", str(stall_id))
        return stall

    async def initiate(self, db: AsyncSession, booking_id: UUID, customer_id: UUID) -> dict:
        """Create a gateway order for the amount due on a booking."""
        booking = await self._get_booking(db, booking_id, customer_id)

        if booking.status in VOIDED_BOOKING_STATUSES:
            raise IneligibleError("This booking can no longer be paid")
        if booking.payment_status == PaymentStatus.COMPLETED.value:
            raise IneligibleError("This booking has already been paid")

        stall = await self._get_stall(db, booking.stall_id)
        amount = round_money(calculate_amount(booking.start_date, booking.end_date, stall.rent_per_day))
        currency = settings.payment_currency
        amount_minor = to_minor_units(amount)
        receipt = build_receipt(booking.id)

        # Raises GatewayUnconfigured / GatewayError with nothing written yet
        order = await self.gateway.create_order(amount_minor, currency, receipt)

        result = await db.execute(
            select(Payment)
            .where(
                Payment.booking_id == booking.id,
                Payment.status == PaymentStatus.PENDING.value,
            )
            .order_by(Payment.processed_at.desc())
            .limit(1)
        )
        payment = result.scalar_one_or_none()
        if payment is None:
            payment = Payment(booking_id=booking.id, status=PaymentStatus.PENDING.value)
            db.add(payment)

        payment.amount = amount
        payment.currency = order.currency
        payment.provider = settings.payment_provider_name
        payment.transaction_reference = order.order_id
        payment.processed_at = utcnow()
        booking.payment_status = PaymentStatus.PENDING.value

        await db.commit()
        logger.info(
            "Gateway order %s created for booking %s (%s %s)",
            order.order_id,
            booking.id,
            amount,
            order.currency,
        )

        customer = await db.get(User, booking.customer_id)
        return {
            "booking_id": booking.id,
            "payment_id": payment.id,
            "key_id": self.gateway.public_key,
            "order_id": order.order_id,
            "amount": order.amount,
            "amount_minor": amount_minor,
            "currency": order.currency,
            "receipt": order.receipt,
            "stall_name": stall.name,
            "customer_name": customer.full_name if customer else "",
            "customer_email": customer.email if customer else "",
            "customer_phone": customer.phone if customer else None,
        }

    async def _completed_payment(self, db: AsyncSession, booking_id: UUID) -> Payment | None:
        result = await db.execute(
            select(Payment)
            .where(
                Payment.booking_id == booking_id,
                Payment.status == PaymentStatus.COMPLETED.value,
            )
            .limit(1)
        )
        return result.scalar_one_or_none()

    def _confirmation(self, booking: Booking, payment: Payment, already_processed: bool) -> dict:
        return {
            "booking_id": booking.id,
            "payment_id": payment.id,
            "status": payment.status,
            "booking_status": booking.status,
            "transaction_reference": payment.transaction_reference,
            "amount": payment.amount,
            "already_processed": already_processed,
        }

    async def confirm(
        self,
        db: AsyncSession,
        booking_id: UUID,
        order_id: str,
        payment_id: str,
        signature: str,
        customer_id: UUID | None = None,
    ) -> dict:
        """Settle a booking from the checkout callback.

        Duplicate callbacks for a paid booking return the recorded result
        without writing anything.

        Raises:
            PaymentVerificationFailed: After voiding the booking when the
                signature does not match or the order was issued for a
                different booking
        """
        booking = await self._get_booking(db, booking_id, customer_id, for_update=True)

        if booking.payment_status == PaymentStatus.COMPLETED.value:
            completed = await self._completed_payment(db, booking.id)
            if completed is not None:
                logger.info("Duplicate payment callback ignored for booking %s", booking.id)
                return self._confirmation(booking, completed, already_processed=True)

        if booking.status in VOIDED_BOOKING_STATUSES:
            raise IneligibleError("This booking can no longer be paid")

        stall = await self._get_stall(db, booking.stall_id)

        # Transaction references are unique across all bookings
        result = await db.execute(select(Payment).where(Payment.transaction_reference == order_id))
        payment = result.scalar_one_or_none()
        foreign_order = payment is not None and payment.booking_id != booking.id
        if (
            payment is None
            or foreign_order
            or payment.status != PaymentStatus.PENDING.value
        ):
            # Callback for an order we have no pending row for
            payment = Payment(
                booking_id=booking.id,
                amount=round_money(
                    calculate_amount(booking.start_date, booking.end_date, stall.rent_per_day)
                ),
                currency=settings.payment_currency,
                provider=settings.payment_provider_name,
                transaction_reference=order_id if payment is None else None,
                status=PaymentStatus.PENDING.value,
            )
            db.add(payment)

        if foreign_order:
            logger.warning("Order %s belongs to another booking, not %s", order_id, booking.id)
            verified = False
        else:
            try:
                verified = self.gateway.verify_signature(order_id, payment_id, signature)
            except GatewayUnconfigured:
                raise
            except Exception:
                logger.exception("Signature verification raised for booking %s", booking.id)
                verified = False

        if not verified:
            await self._void(db, booking, payment, stall)
            logger.warning(
                "Payment verification failed for booking %s (order %s)",
                booking.id,
                order_id,
            )
            raise PaymentVerificationFailed()

        assert_payment_transition(payment.status, PaymentStatus.COMPLETED.value)
        payment.status = PaymentStatus.COMPLETED.value
        payment.transaction_reference = payment_id
        payment.processed_at = utcnow()
        booking.payment_status = PaymentStatus.COMPLETED.value
        booking.status = BookingStatus.APPROVED.value
        stall.status = StallStatus.BOOKED.value

        try:
            await db.commit()
        except IntegrityError:
            # The same payment id was settled by a concurrent callback
            await db.rollback()
            booking = await self._get_booking(db, booking_id, customer_id)
            completed = await self._completed_payment(db, booking.id)
            if completed is None:
                raise
            logger.info("Concurrent payment callback ignored for booking %s", booking.id)
            return self._confirmation(booking, completed, already_processed=True)

        logger.info("Payment %s completed for booking %s", payment_id, booking.id)
        return self._confirmation(booking, payment, already_processed=False)

    async def _void(self, db: AsyncSession, booking: Booking, payment: Payment, stall: Stall) -> None:
        assert_payment_transition(payment.status, PaymentStatus.FAILED.value)
        payment.status = PaymentStatus.FAILED.value
        payment.processed_at = utcnow()
        booking.payment_status = PaymentStatus.FAILED.value
        booking.status = BookingStatus.CANCELLED.value
        stall.status = StallStatus.AVAILABLE.value
        await release_days(db, booking.id)
        await db.commit()

    async def list_for_booking(self, db: AsyncSession, booking_id: UUID, caller: User) -> list[Payment]:
        """List payment attempts for a booking, newest first.

        Visible to the customer, the stall owner and admins.
        """
        booking = await self._get_booking(db, booking_id, None)
        if booking.customer_id != caller.id:
            stall = await self._get_stall(db, booking.stall_id)
            ensure_authorized(caller.id, caller.roles, stall.owner_id)

        result = await db.execute(
            select(Payment)
            .where(Payment.booking_id == booking.id)
            .order_by(Payment.processed_at.desc())
        )
        return list(result.scalars().all())


# Singleton instance
payment_service = PaymentService()

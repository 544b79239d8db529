"""Booking lifecycle service.

A booking holds its stall's calendar days from creation until it is
rejected or cancelled. Days are held twice: the overlap query below is the
fast path, and one ``StallReservationDay`` row per day (unique per stall)
makes a second live booking on the same day fail at flush time.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from decimal import Decimal
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from stallbook.config import settings
from stallbook.core.exceptions import DatesNotAvailable, InvalidDateRange, NotFoundError
from stallbook.core.permissions import ensure_authorized
from stallbook.domain.booking_state import (
    VOIDED_BOOKING_STATUSES,
    BookingStatus,
    StallStatus,
    assert_booking_transition,
    today,
)
from stallbook.domain.payment_state import PaymentStatus
from stallbook.domain.pricing import booking_days, calculate_amount, round_money
from stallbook.models.booking import Booking, StallReservationDay
from stallbook.models.feedback import Feedback
from stallbook.models.payment import Payment
from stallbook.models.stall import Stall
from stallbook.models.user import User

logger = logging.getLogger(__name__)


def validate_date_range(start_date: date, end_date: date, current_date: date | None = None) -> None:
    """Reject reversed ranges and ranges starting before today."""
    if end_date < start_date:
        raise InvalidDateRange("End date should be on or after the start date")
    if start_date < (current_date or today()):
        raise InvalidDateRange("Start date cannot be in the past")


async def has_overlap(
    db: AsyncSession,
    stall_id: UUID,
    start_date: date,
    end_date: date,
) -> bool:
    """Check whether a live booking on the stall shares any day with the range."""
    query = select(Booking.id).where(
        Booking.stall_id == stall_id,
        Booking.status.not_in(list(VOIDED_BOOKING_STATUSES)),
        Booking.start_date <= end_date,
        Booking.end_date >= start_date,
    )
    result = await db.execute(query.limit(1))
    return result.scalar_one_or_none() is not None


def reserve_days(db: AsyncSession, booking: Booking) -> None:
    """Stage one reservation row per booked day."""
    day = booking.start_date
    while day <= booking.end_date:
        db.add(StallReservationDay(stall_id=booking.stall_id, booking_id=booking.id, day=day))
        day += timedelta(days=1)


async def release_days(db: AsyncSession, booking_id: UUID) -> None:
    """Free the stall days held by a booking."""
    await db.execute(
        delete(StallReservationDay).where(StallReservationDay.booking_id == booking_id)
    )


class BookingService:
    """Service for creating bookings and applying owner decisions."""

    async def create(
        self,
        db: AsyncSession,
        stall_id: UUID,
        customer_id: UUID,
        start_date: date,
        end_date: date,
        auto_approve: bool | None = None,
    ) -> Booking:
        """Book a stall for an inclusive date range.

        With auto-approval the booking starts approved and the stall booked;
        otherwise it waits for the owner and the stall is held in maintenance.
        """
        stall = await db.get(Stall, stall_id)
        if not stall:
            raise NotFoundError("Stall", str(stall_id))

        validate_date_range(start_date, end_date)

        if await has_overlap(db, stall.id, start_date, end_date):
            raise DatesNotAvailable()

        if auto_approve is None:
            auto_approve = settings.booking_auto_approve

        booking = Booking(
            stall_id=stall.id,
            customer_id=customer_id,
            start_date=start_date,
            end_date=end_date,
            status=(BookingStatus.APPROVED if auto_approve else BookingStatus.PENDING).value,
            payment_status=PaymentStatus.PENDING.value,
        )
        db.add(booking)
        await db.flush()
        reserve_days(db, booking)
        stall.status = (StallStatus.BOOKED if auto_approve else StallStatus.MAINTENANCE).value

        try:
            await db.commit()
        except IntegrityError as e:
            # Another request claimed one of these days after our overlap check
            await db.rollback()
            logger.info("Booking race lost for stall %s (%s..%s)", stall_id, start_date, end_date)
            raise DatesNotAvailable() from e

        logger.info(
            "Booking %s created for stall %s by %s (%s)",
            booking.id,
            stall_id,
            customer_id,
            booking.status,
        )
        return booking

    async def _get_owned_booking(
        self,
        db: AsyncSession,
        booking_id: UUID,
        owner_id: UUID,
    ) -> tuple[Booking, Stall]:
        booking = await db.get(Booking, booking_id)
        if not booking:
            raise NotFoundError("Booking", str(booking_id))
        stall = await db.get(Stall, booking.stall_id)
        ensure_authorized(
            owner_id,
            (),
            stall.owner_id,
            admin_override=False,
            detail="Only the stall owner can decide on this booking",
        )
        return booking, stall

    async def approve(self, db: AsyncSession, booking_id: UUID, owner_id: UUID) -> Booking:
        """Approve a pending booking; the stall becomes booked."""
        booking, stall = await self._get_owned_booking(db, booking_id, owner_id)
        assert_booking_transition(booking.status, BookingStatus.APPROVED.value)

        booking.status = BookingStatus.APPROVED.value
        stall.status = StallStatus.BOOKED.value
        await db.commit()

        logger.info("Booking %s approved by owner %s", booking.id, owner_id)
        return booking

    async def reject(self, db: AsyncSession, booking_id: UUID, owner_id: UUID) -> Booking:
        """Reject a pending booking; the stall and its days are released."""
        booking, stall = await self._get_owned_booking(db, booking_id, owner_id)
        assert_booking_transition(booking.status, BookingStatus.REJECTED.value)

        booking.status = BookingStatus.REJECTED.value
        stall.status = StallStatus.AVAILABLE.value
        await release_days(db, booking.id)
        await db.commit()

        logger.info("Booking %s rejected by owner %s", booking.id, owner_id)
        return booking

    async def get_for_customer(self, db: AsyncSession, booking_id: UUID, customer_id: UUID) -> Booking:
        """Get a booking; bookings of other customers are reported as missing."""
        booking = await db.get(Booking, booking_id)
        if not booking or booking.customer_id != customer_id:
            raise NotFoundError("Booking", str(booking_id))
        return booking

    async def list_for_customer(self, db: AsyncSession, customer_id: UUID) -> list[dict]:
        """List a customer's bookings, newest first, with what they can do next."""
        result = await db.execute(
            select(Booking, Stall)
            .join(Stall, Stall.id == Booking.stall_id)
            .where(Booking.customer_id == customer_id)
            .order_by(Booking.created_at.desc())
        )
        rows = result.all()

        booking_ids = [booking.id for booking, _ in rows]
        reviewed: set[UUID] = set()
        if booking_ids:
            feedback = await db.execute(
                select(Feedback.booking_id).where(Feedback.booking_id.in_(booking_ids))
            )
            reviewed = set(feedback.scalars().all())

        current_date = today()
        items = []
        for booking, stall in rows:
            paid = booking.payment_status == PaymentStatus.COMPLETED.value
            has_feedback = booking.id in reviewed
            items.append(
                {
                    "booking": booking,
                    "stall_name": stall.name,
                    "stall_location": stall.location,
                    "amount": round_money(
                        calculate_amount(booking.start_date, booking.end_date, stall.rent_per_day)
                    ),
                    "has_feedback": has_feedback,
                    "can_pay": booking.status not in VOIDED_BOOKING_STATUSES and not paid,
                    "can_leave_feedback": (
                        booking.status == BookingStatus.APPROVED.value
                        and paid
                        and booking.end_date <= current_date
                        and not has_feedback
                    ),
                }
            )
        return items

    async def list_for_owner(self, db: AsyncSession, owner_id: UUID) -> list[dict]:
        """List bookings on an owner's stalls, newest first."""
        result = await db.execute(
            select(Booking, Stall, User)
            .join(Stall, Stall.id == Booking.stall_id)
            .join(User, User.id == Booking.customer_id)
            .where(Stall.owner_id == owner_id)
            .order_by(Booking.created_at.desc())
        )
        rows = result.all()

        latest_status: dict[UUID, str] = {}
        booking_ids = [booking.id for booking, _, _ in rows]
        if booking_ids:
            payments = await db.execute(
                select(Payment.booking_id, Payment.status)
                .where(Payment.booking_id.in_(booking_ids))
                .order_by(Payment.processed_at.desc())
            )
            for booking_id, status in payments.all():
                latest_status.setdefault(booking_id, status)

        return [
            {
                "booking": booking,
                "stall_name": stall.name,
                "customer_name": customer.full_name,
                "customer_email": customer.email,
                "amount": round_money(
                    calculate_amount(booking.start_date, booking.end_date, stall.rent_per_day)
                ),
                "latest_payment_status": latest_status.get(booking.id),
            }
            for booking, stall, customer in rows
        ]

    async def quote(
        self,
        db: AsyncSession,
        stall_id: UUID,
        start_date: date,
        end_date: date,
    ) -> dict:
        """Preview the rent for a date range without booking."""
        stall = await db.get(Stall, stall_id)
        if not stall:
            raise NotFoundError("Stall", str(stall_id))
        if end_date < start_date:
            raise InvalidDateRange("End date should be on or after the start date")

        available = start_date >= today() and not await has_overlap(
            db, stall.id, start_date, end_date
        )
        return {
            "stall_id": stall.id,
            "start_date": start_date,
            "end_date": end_date,
            "days": booking_days(start_date, end_date),
            "rent_per_day": Decimal(stall.rent_per_day),
            "amount": round_money(calculate_amount(start_date, end_date, stall.rent_per_day)),
            "available": available,
        }


# Singleton instance
booking_service = BookingService()

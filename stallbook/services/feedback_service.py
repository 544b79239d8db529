"""Feedback service."""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from stallbook.core.exceptions import (
    AlreadyExistsError,
    IneligibleError,
    NotFoundError,
    ValidationError,
)
from stallbook.domain.booking_state import BookingStatus, today
from stallbook.domain.payment_state import PaymentStatus
from stallbook.models.booking import Booking
from stallbook.models.feedback import Feedback
from stallbook.models.stall import Stall
from stallbook.models.user import User

logger = logging.getLogger(__name__)


class FeedbackService:
    """Service for customer feedback on finished bookings."""

    async def submit(
        self,
        db: AsyncSession,
        booking_id: UUID,
        customer_id: UUID,
        rating: int | None,
        comments: str | None,
    ) -> Feedback:
        """Record the single feedback entry allowed for a paid, finished booking."""
        booking = await db.get(Booking, booking_id)
        if not booking or booking.customer_id != customer_id:
            raise NotFoundError("Booking", str(booking_id))

        if (
            booking.status != BookingStatus.APPROVED.value
            or booking.payment_status != PaymentStatus.COMPLETED.value
            or booking.end_date > today()
        ):
            raise IneligibleError("Feedback can be left once a paid booking has ended")

        if rating is not None and not 1 <= rating <= 5:
            raise ValidationError("Rating must be between 1 and 5")

        existing = await db.execute(select(Feedback.id).where(Feedback.booking_id == booking.id))
        if existing.scalar_one_or_none():
            raise AlreadyExistsError("Feedback has already been submitted for this booking")

        feedback = Feedback(booking_id=booking.id, rating=rating, comments=comments)
        db.add(feedback)
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            raise AlreadyExistsError("Feedback has already been submitted for this booking") from e

        logger.info("Feedback %s recorded for booking %s", feedback.id, booking.id)
        return feedback

    async def list_for_owner(self, db: AsyncSession, owner_id: UUID) -> list[dict]:
        """Feedback on an owner's stalls, newest first."""
        result = await db.execute(
            select(Feedback, Stall.name, User.full_name)
            .join(Booking, Booking.id == Feedback.booking_id)
            .join(Stall, Stall.id == Booking.stall_id)
            .join(User, User.id == Booking.customer_id)
            .where(Stall.owner_id == owner_id)
            .order_by(Feedback.submitted_at.desc())
        )
        return [
            {"feedback": feedback, "stall_name": stall_name, "customer_name": customer_name}
            for feedback, stall_name, customer_name in result.all()
        ]


# Singleton instance
feedback_service = FeedbackService()

"""Booking-related database models."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Date, DateTime, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from stallbook.database import Base, utcnow
from stallbook.domain.pricing import booking_days

if TYPE_CHECKING:
    from stallbook.models.feedback import Feedback
    from stallbook.models.payment import Payment
    from stallbook.models.stall import Stall
    from stallbook.models.user import User


class Booking(Base):
    """A customer's reservation of a stall for an inclusive date range."""

    __tablename__ = "bookings"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    stall_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("stalls.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    customer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True
    )

    # Dates (inclusive)
    start_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    end_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    # Status
    status: Mapped[str] = mapped_column(
        String(20), default="pending", index=True
    )  # pending, approved, rejected, cancelled
    payment_status: Mapped[str] = mapped_column(
        String(20), default="pending"
    )  # pending, completed, failed

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now()
    )

    # Relationships
    stall: Mapped["Stall"] = relationship("Stall", back_populates="bookings")
    customer: Mapped["User"] = relationship("User")
    payments: Mapped[list["Payment"]] = relationship(
        "Payment", back_populates="booking", cascade="all, delete-orphan"
    )
    feedback: Mapped["Feedback | None"] = relationship(
        "Feedback", back_populates="booking", cascade="all, delete-orphan", uselist=False
    )
    reserved_days: Mapped[list["StallReservationDay"]] = relationship(
        "StallReservationDay", back_populates="booking", cascade="all, delete-orphan"
    )

    @property
    def days(self) -> int:
        """Chargeable days, both ends inclusive."""
        return booking_days(self.start_date, self.end_date)


class StallReservationDay(Base):
    """One calendar day of a stall held by a live booking.

    The unique (stall_id, day) pair makes overlapping live bookings impossible
    at the database level, even when two requests pass the overlap query at
    the same time.
    """

    __tablename__ = "stall_reservation_days"
    __table_args__ = (
        UniqueConstraint("stall_id", "day", name="uq_stall_reservation_day"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    stall_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("stalls.id", ondelete="CASCADE"), nullable=False
    )
    booking_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    day: Mapped[date] = mapped_column(Date, nullable=False)

    booking: Mapped["Booking"] = relationship("Booking", back_populates="reserved_days")

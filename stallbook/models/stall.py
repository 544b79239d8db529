"""Stall and event database models."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from stallbook.database import Base, utcnow

if TYPE_CHECKING:
    from stallbook.models.booking import Booking
    from stallbook.models.user import User


class Event(Base):
    """Exhibition event grouping a set of numbered stall slots."""

    __tablename__ = "events"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    location: Mapped[str] = mapped_column(String(150), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    stall_size: Mapped[str | None] = mapped_column(String(100))
    slot_price: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=Decimal("0"))
    total_slots: Mapped[int] = mapped_column(Integer, default=0)
    description: Mapped[str | None] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now()
    )

    # Relationships
    owner: Mapped["User"] = relationship("User", back_populates="events")
    stalls: Mapped[list["Stall"]] = relationship("Stall", back_populates="event")


class Stall(Base):
    """Bookable exhibition stall, optionally a numbered slot of an event."""

    __tablename__ = "stalls"
    __table_args__ = (
        UniqueConstraint("event_id", "slot_number", name="uq_stalls_event_slot"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    event_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("events.id", ondelete="CASCADE"), index=True
    )
    slot_number: Mapped[int | None] = mapped_column(Integer)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    location: Mapped[str] = mapped_column(String(150), nullable=False)
    size: Mapped[str | None] = mapped_column(String(100))
    rent_per_day: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)

    status: Mapped[str] = mapped_column(
        String(20), default="available", index=True
    )  # available, booked, maintenance

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now()
    )

    # Relationships
    owner: Mapped["User"] = relationship("User", back_populates="stalls")
    event: Mapped["Event | None"] = relationship("Event", back_populates="stalls")
    bookings: Mapped[list["Booking"]] = relationship(
        "Booking", back_populates="stall", passive_deletes="all"
    )

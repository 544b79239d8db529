"""Feedback database model."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from stallbook.database import Base, utcnow

if TYPE_CHECKING:
    from stallbook.models.booking import Booking


class Feedback(Base):
    """Customer feedback on a completed booking (one per booking)."""

    __tablename__ = "feedback"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    booking_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, unique=True
    )

    rating: Mapped[int | None] = mapped_column(Integer)  # 1-5
    comments: Mapped[str | None] = mapped_column(String(500))

    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    # Relationships
    booking: Mapped["Booking"] = relationship("Booking", back_populates="feedback")

"""Payment database model."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from stallbook.database import Base, utcnow

if TYPE_CHECKING:
    from stallbook.models.booking import Booking


class Payment(Base):
    """Payment attempt for a booking.

    A booking may collect several attempts; at most one reaches completed.
    """

    __tablename__ = "payments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    booking_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True
    )

    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), default="INR")

    provider: Mapped[str | None] = mapped_column(String(100))
    # Gateway order id while pending, payment id once completed
    transaction_reference: Mapped[str | None] = mapped_column(String(100), unique=True)

    status: Mapped[str] = mapped_column(
        String(20), default="pending", index=True
    )  # pending, completed, failed

    processed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    # Relationships
    booking: Mapped["Booking"] = relationship("Booking", back_populates="payments")

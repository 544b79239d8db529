"""Booking and stall state machines."""

from datetime import UTC, date, datetime
from enum import Enum

from stallbook.core.exceptions import ValidationError


class StallStatus(str, Enum):
    AVAILABLE = "available"
    BOOKED = "booked"
    MAINTENANCE = "maintenance"


class BookingStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


# Bookings in these states no longer hold their dates
VOIDED_BOOKING_STATUSES = frozenset({BookingStatus.REJECTED.value, BookingStatus.CANCELLED.value})

BOOKING_TRANSITIONS = {
    "pending": {"approved", "rejected", "cancelled"},
    "approved": {"cancelled"},
    "rejected": set(),
    "cancelled": set(),
}


def assert_booking_transition(current: str, target: str) -> None:
    allowed = BOOKING_TRANSITIONS.get(current, set())
    if target not in allowed:
        raise ValidationError(
            f"Invalid booking transition: {current} → {target}"
        )


def today() -> date:
    """Current UTC calendar date; bookings and feedback cutoffs are day-based."""
    return datetime.now(UTC).date()

"""Database models."""

from stallbook.models.booking import Booking, StallReservationDay
from stallbook.models.feedback import Feedback
from stallbook.models.payment import Payment
from stallbook.models.stall import Event, Stall
from stallbook.models.user import StallOwnerApplication, User

__all__ = [
    # User
    "User",
    "StallOwnerApplication",
    # Stall
    "Event",
    "Stall",
    # Booking
    "Booking",
    "StallReservationDay",
    # Payment
    "Payment",
    # Feedback
    "Feedback",
]

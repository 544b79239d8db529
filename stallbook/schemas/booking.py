"""Booking-related Pydantic schemas."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class BookingCreate(BaseModel):
    """Schema for creating a booking.

    Date ordering is checked by the booking service so that reversed ranges
    surface as the same error whatever the entry point.
    """

    stall_id: UUID
    start_date: date
    end_date: date


class BookingQuoteRequest(BaseModel):
    """Schema for previewing the rent of a booking."""

    stall_id: UUID
    start_date: date
    end_date: date


class BookingQuoteResponse(BaseModel):
    """Schema for booking price preview."""

    stall_id: UUID
    start_date: date
    end_date: date
    days: int
    rent_per_day: Decimal
    amount: Decimal
    available: bool


class BookingResponse(BaseModel):
    """Schema for booking response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    stall_id: UUID
    customer_id: UUID
    start_date: date
    end_date: date
    days: int
    status: str
    payment_status: str
    created_at: datetime
    updated_at: datetime


class BookingListItem(BaseModel):
    """Booking row with stall details and amount due."""

    booking: BookingResponse
    stall_name: str
    stall_location: str
    amount: Decimal
    has_feedback: bool = False
    can_pay: bool = False
    can_leave_feedback: bool = False


class OwnerBookingItem(BaseModel):
    """Booking row as seen by the stall owner."""

    booking: BookingResponse
    stall_name: str
    customer_name: str
    customer_email: str
    amount: Decimal
    latest_payment_status: str | None = None

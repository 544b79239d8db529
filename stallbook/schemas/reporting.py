"""Dashboard and report schemas (read-only)."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel


class AdminDashboard(BaseModel):
    """Platform-wide counters for administrators."""

    total_users: int
    active_customers: int
    active_owners: int
    total_stalls: int
    available_stalls: int
    pending_owner_applications: int
    pending_bookings: int
    total_revenue: Decimal
    failed_payments: int
    total_payments: int


class BookingDetail(BaseModel):
    """Booking line with its preferred payment."""

    booking_id: UUID
    stall_id: UUID
    stall_name: str
    customer_name: str
    customer_email: str | None = None
    start_date: date
    end_date: date
    status: str
    payment_status: str
    amount: Decimal
    payment_reference: str | None = None
    payment_date: datetime | None = None
    payment_amount: Decimal | None = None
    payment_provider: str | None = None


class FeedbackDetail(BaseModel):
    """Feedback line with stall and customer names."""

    stall_name: str
    customer_name: str
    rating: int | None = None
    comments: str | None = None
    submitted_at: datetime


class StallSummary(BaseModel):
    """Per-stall figures on the owner dashboard."""

    stall_id: UUID
    event_id: UUID | None = None
    event_name: str | None = None
    slot_number: int | None = None
    name: str
    location: str
    size: str | None = None
    rent_per_day: Decimal
    status: str
    total_bookings: int
    pending_requests: int
    total_revenue: Decimal
    average_rating: float | None = None
    review_count: int
    next_booking: BookingDetail | None = None


class OwnerDashboard(BaseModel):
    """Stall owner's overview of stalls, bookings and feedback."""

    stall_count: int
    pending_bookings: int
    upcoming_bookings: int
    total_revenue: Decimal
    stall_summaries: list[StallSummary]
    upcoming_booking_details: list[BookingDetail]
    recent_feedback: list[FeedbackDetail]


class StallDetailReport(BaseModel):
    """Administrative view of a stall's history."""

    stall_id: UUID
    name: str
    location: str
    size: str | None = None
    description: str | None = None
    rent_per_day: Decimal
    status: str
    created_at: datetime
    updated_at: datetime | None = None
    owner_name: str | None = None
    owner_email: str | None = None
    owner_phone: str | None = None
    owner_company: str | None = None
    total_bookings: int
    pending_requests: int
    total_revenue: Decimal
    average_rating: float | None = None
    review_count: int
    booking_history: list[BookingDetail]
    feedback: list[FeedbackDetail]


class PaymentReportItem(BaseModel):
    """Single payment row in the payment report."""

    id: UUID
    booking_id: UUID
    stall_name: str
    customer_name: str
    amount: Decimal
    currency: str
    provider: str | None = None
    transaction_reference: str | None = None
    status: str
    processed_at: datetime

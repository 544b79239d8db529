"""Pydantic schemas for API validation."""

from stallbook.schemas.booking import (
    BookingCreate,
    BookingListItem,
    BookingQuoteRequest,
    BookingQuoteResponse,
    BookingResponse,
    OwnerBookingItem,
)
from stallbook.schemas.feedback import FeedbackCreate, FeedbackResponse, OwnerFeedbackItem
from stallbook.schemas.payment import (
    CheckoutResponse,
    PaymentConfirmRequest,
    PaymentConfirmResponse,
    PaymentResponse,
)
from stallbook.schemas.reporting import (
    AdminDashboard,
    OwnerDashboard,
    PaymentReportItem,
    StallDetailReport,
)
from stallbook.schemas.stall import (
    EventCreate,
    EventDetailResponse,
    EventListItem,
    EventResponse,
    SlotCreate,
    StallCreate,
    StallResponse,
    StallUpdate,
)
from stallbook.schemas.user import (
    ApplicationCreate,
    ApplicationListItem,
    ApplicationResponse,
    RegistrationResponse,
    TokenResponse,
    UserAdminUpdate,
    UserCreate,
    UserLogin,
    UserResponse,
)

__all__ = [
    # User
    "UserCreate",
    "UserLogin",
    "UserAdminUpdate",
    "UserResponse",
    "TokenResponse",
    "RegistrationResponse",
    "ApplicationCreate",
    "ApplicationResponse",
    "ApplicationListItem",
    # Stall
    "StallCreate",
    "StallUpdate",
    "StallResponse",
    "EventCreate",
    "EventResponse",
    "EventListItem",
    "EventDetailResponse",
    "SlotCreate",
    # Booking
    "BookingCreate",
    "BookingResponse",
    "BookingListItem",
    "BookingQuoteRequest",
    "BookingQuoteResponse",
    "OwnerBookingItem",
    # Payment
    "CheckoutResponse",
    "PaymentConfirmRequest",
    "PaymentConfirmResponse",
    "PaymentResponse",
    # Feedback
    "FeedbackCreate",
    "FeedbackResponse",
    "OwnerFeedbackItem",
    # Reporting
    "AdminDashboard",
    "OwnerDashboard",
    "PaymentReportItem",
    "StallDetailReport",
]

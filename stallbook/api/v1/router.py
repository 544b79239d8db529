"""Main API router that includes all endpoint routers."""

from fastapi import APIRouter

from stallbook.api.v1 import admin, auth, bookings, events, feedback, owner, payments, stalls

api_router = APIRouter()

# Authentication
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])

# Stalls
api_router.include_router(stalls.router, prefix="/stalls", tags=["Stalls"])

# Events
api_router.include_router(events.router, prefix="/events", tags=["Events"])

# Bookings
api_router.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])

# Payments
api_router.include_router(payments.router, prefix="/payments", tags=["Payments"])

# Feedback
api_router.include_router(feedback.router, prefix="/feedback", tags=["Feedback"])

# Stall owners
api_router.include_router(owner.router, prefix="/owner", tags=["Stall Owner"])

# Admin
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])

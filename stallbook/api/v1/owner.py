"""Stall owner endpoints."""

from uuid import UUID

from fastapi import APIRouter

from stallbook.api.deps import DB, Owner
from stallbook.schemas.booking import BookingResponse, OwnerBookingItem
from stallbook.schemas.feedback import OwnerFeedbackItem
from stallbook.schemas.reporting import OwnerDashboard
from stallbook.schemas.stall import StallResponse
from stallbook.services.booking_service import booking_service
from stallbook.services.feedback_service import feedback_service
from stallbook.services.reporting_service import reporting_service
from stallbook.services.stall_service import stall_service

router = APIRouter()


@router.get("/dashboard", response_model=OwnerDashboard)
async def get_dashboard(current_user: Owner, db: DB) -> OwnerDashboard:
    """Overview of the owner's stalls, bookings and feedback."""
    return OwnerDashboard(**await reporting_service.get_owner_dashboard(db, current_user.id))


@router.get("/stalls", response_model=list[StallResponse])
async def list_my_stalls(current_user: Owner, db: DB) -> list[StallResponse]:
    """List the owner's stalls."""
    stalls = await stall_service.list(db, owner_id=current_user.id)
    return [StallResponse.model_validate(s) for s in stalls]


@router.get("/bookings", response_model=list[OwnerBookingItem])
async def list_bookings(current_user: Owner, db: DB) -> list[OwnerBookingItem]:
    """List bookings on the owner's stalls."""
    rows = await booking_service.list_for_owner(db, current_user.id)
    return [OwnerBookingItem.model_validate(row, from_attributes=True) for row in rows]


@router.post("/bookings/{booking_id}/approve", response_model=BookingResponse)
async def approve_booking(booking_id: UUID, current_user: Owner, db: DB) -> BookingResponse:
    """Approve a pending booking."""
    booking = await booking_service.approve(db, booking_id, current_user.id)
    return BookingResponse.model_validate(booking)


@router.post("/bookings/{booking_id}/reject", response_model=BookingResponse)
async def reject_booking(booking_id: UUID, current_user: Owner, db: DB) -> BookingResponse:
    """Reject a pending booking."""
    booking = await booking_service.reject(db, booking_id, current_user.id)
    return BookingResponse.model_validate(booking)


@router.get("/feedback", response_model=list[OwnerFeedbackItem])
async def list_feedback(current_user: Owner, db: DB) -> list[OwnerFeedbackItem]:
    """Feedback left on the owner's stalls."""
    rows = await feedback_service.list_for_owner(db, current_user.id)
    return [OwnerFeedbackItem.model_validate(row, from_attributes=True) for row in rows]

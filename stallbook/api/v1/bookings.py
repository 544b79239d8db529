"""Booking endpoints."""

from uuid import UUID

from fastapi import APIRouter, status

from stallbook.api.deps import DB, Customer
from stallbook.schemas.booking import (
    BookingCreate,
    BookingListItem,
    BookingQuoteRequest,
    BookingQuoteResponse,
    BookingResponse,
)
from stallbook.services.booking_service import booking_service

router = APIRouter()


@router.post("/quote", response_model=BookingQuoteResponse)
async def quote_booking(request: BookingQuoteRequest, db: DB) -> BookingQuoteResponse:
    """Preview the rent for a date range without booking."""
    quote = await booking_service.quote(db, request.stall_id, request.start_date, request.end_date)
    return BookingQuoteResponse(**quote)


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(data: BookingCreate, current_user: Customer, db: DB) -> BookingResponse:
    """Book a stall for a date range."""
    booking = await booking_service.create(
        db, data.stall_id, current_user.id, data.start_date, data.end_date
    )
    return BookingResponse.model_validate(booking)


@router.get("", response_model=list[BookingListItem])
async def list_my_bookings(current_user: Customer, db: DB) -> list[BookingListItem]:
    """List the current customer's bookings."""
    rows = await booking_service.list_for_customer(db, current_user.id)
    return [BookingListItem.model_validate(row, from_attributes=True) for row in rows]


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(booking_id: UUID, current_user: Customer, db: DB) -> BookingResponse:
    """Get one of the current customer's bookings."""
    booking = await booking_service.get_for_customer(db, booking_id, current_user.id)
    return BookingResponse.model_validate(booking)


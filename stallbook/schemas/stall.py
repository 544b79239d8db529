"""Stall and event Pydantic schemas."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class StallBase(BaseModel):
    """Base stall schema."""

    name: str = Field(..., min_length=1, max_length=100)
    location: str = Field(..., min_length=1, max_length=150)
    size: str | None = Field(None, max_length=100)
    rent_per_day: Decimal = Field(..., gt=0, max_digits=18, decimal_places=2)
    description: str | None = Field(None, max_length=2000)


class StallCreate(StallBase):
    """Schema for creating a standalone stall."""

    pass


class StallUpdate(BaseModel):
    """Schema for updating a stall."""

    name: str | None = Field(None, min_length=1, max_length=100)
    location: str | None = Field(None, min_length=1, max_length=150)
    size: str | None = Field(None, max_length=100)
    rent_per_day: Decimal | None = Field(None, gt=0, max_digits=18, decimal_places=2)
    description: str | None = Field(None, max_length=2000)
    status: str | None = Field(None, pattern="^(available|booked|maintenance)$")


class StallResponse(BaseModel):
    """Schema for stall response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    owner_id: UUID
    event_id: UUID | None = None
    slot_number: int | None = None
    name: str
    location: str
    size: str | None = None
    rent_per_day: Decimal
    description: str | None = None
    status: str
    created_at: datetime
    updated_at: datetime


class EventCreate(BaseModel):
    """Schema for creating an event together with its numbered slots."""

    name: str = Field(..., min_length=1, max_length=150)
    location: str = Field(..., min_length=1, max_length=150)
    start_date: date
    end_date: date
    stall_size: str | None = Field(None, max_length=100)
    slot_price: Decimal = Field(..., ge=0, max_digits=18, decimal_places=2)
    total_slots: int = Field(default=10, ge=0, le=500)
    description: str | None = Field(None, max_length=2000)

    @field_validator("end_date")
    @classmethod
    def validate_end_date(cls, v: date, info) -> date:
        start_date = info.data.get("start_date")
        if start_date and v < start_date:
            raise ValueError("end_date must be on or after start_date")
        return v


class SlotCreate(BaseModel):
    """Schema for adding a slot to an event.

    Blank text fields and a non-positive rent fall back to the event's values.
    """

    slot_number: int = Field(..., ge=1)
    name: str | None = Field(None, max_length=100)
    location: str | None = Field(None, max_length=150)
    size: str | None = Field(None, max_length=100)
    rent_per_day: Decimal | None = Field(None, max_digits=18, decimal_places=2)
    description: str | None = Field(None, max_length=2000)
    status: str = Field(default="available", pattern="^(available|booked|maintenance)$")


class EventResponse(BaseModel):
    """Schema for event response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    owner_id: UUID
    name: str
    location: str
    start_date: date
    end_date: date
    stall_size: str | None = None
    slot_price: Decimal
    total_slots: int
    description: str | None = None
    created_at: datetime


class EventListItem(BaseModel):
    """Event with slot availability counts."""

    event: EventResponse
    slot_count: int
    available_slots: int


class EventDetailResponse(EventListItem):
    """Event with its slots ordered by slot number."""

    slots: list[StallResponse]

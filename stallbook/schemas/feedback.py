"""Feedback Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class FeedbackCreate(BaseModel):
    """Schema for submitting feedback on a booking."""

    booking_id: UUID
    rating: int | None = Field(None, ge=1, le=5)
    comments: str | None = Field(None, max_length=500)


class FeedbackResponse(BaseModel):
    """Schema for feedback response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    booking_id: UUID
    rating: int | None = None
    comments: str | None = None
    submitted_at: datetime


class OwnerFeedbackItem(BaseModel):
    """Feedback row with booking context for stall owners."""

    feedback: FeedbackResponse
    stall_name: str
    customer_name: str

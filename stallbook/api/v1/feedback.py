"""Feedback endpoints."""

from fastapi import APIRouter, status

from stallbook.api.deps import DB, Customer
from stallbook.schemas.feedback import FeedbackCreate, FeedbackResponse
from stallbook.services.feedback_service import feedback_service

router = APIRouter()


@router.post("", response_model=FeedbackResponse, status_code=status.HTTP_201_CREATED)
async def submit_feedback(data: FeedbackCreate, current_user: Customer, db: DB) -> FeedbackResponse:
    """Leave feedback on a paid booking that has ended."""
    feedback = await feedback_service.submit(
        db, data.booking_id, current_user.id, data.rating, data.comments
    )
    return FeedbackResponse.model_validate(feedback)

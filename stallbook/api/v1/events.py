"""Event endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from stallbook.api.deps import DB, Owner
from stallbook.schemas.stall import (
    EventCreate,
    EventDetailResponse,
    EventListItem,
    EventResponse,
    SlotCreate,
    StallResponse,
)
from stallbook.services.stall_service import stall_service

router = APIRouter()


@router.get("", response_model=list[EventListItem])
async def list_events(
    db: DB,
    search: str | None = Query(None, max_length=100),
) -> list[EventListItem]:
    """Browse events with slot availability."""
    rows = await stall_service.list_events(db, search=search)
    return [EventListItem.model_validate(row, from_attributes=True) for row in rows]


@router.get("/{event_id}", response_model=EventDetailResponse)
async def get_event(event_id: UUID, db: DB) -> EventDetailResponse:
    """Get an event and its slots."""
    detail = await stall_service.get_event(db, event_id)
    return EventDetailResponse.model_validate(detail, from_attributes=True)


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(data: EventCreate, current_user: Owner, db: DB) -> EventResponse:
    """Create an event with numbered slots."""
    event = await stall_service.create_event(db, current_user.id, data)
    return EventResponse.model_validate(event)


@router.post(
    "/{event_id}/slots",
    response_model=StallResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_slot(
    event_id: UUID,
    data: SlotCreate,
    current_user: Owner,
    db: DB,
) -> StallResponse:
    """Add a slot to one of the owner's events."""
    stall = await stall_service.add_slot(db, event_id, current_user.id, data)
    return StallResponse.model_validate(stall)

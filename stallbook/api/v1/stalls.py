"""Stall endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from stallbook.api.deps import DB, OwnerOrAdmin
from stallbook.schemas.stall import StallCreate, StallResponse, StallUpdate
from stallbook.services.stall_service import stall_service

router = APIRouter()


@router.get("", response_model=list[StallResponse])
async def list_stalls(
    db: DB,
    search: str | None = Query(None, max_length=100),
    status_filter: str | None = Query(
        None, alias="status", pattern="^(available|booked|maintenance)$"
    ),
) -> list[StallResponse]:
    """Browse stalls."""
    stalls = await stall_service.list(db, search=search, status=status_filter)
    return [StallResponse.model_validate(s) for s in stalls]


@router.get("/{stall_id}", response_model=StallResponse)
async def get_stall(stall_id: UUID, db: DB) -> StallResponse:
    """Get stall details."""
    return StallResponse.model_validate(await stall_service.get(db, stall_id))


@router.post("", response_model=StallResponse, status_code=status.HTTP_201_CREATED)
async def create_stall(data: StallCreate, current_user: OwnerOrAdmin, db: DB) -> StallResponse:
    """Register a standalone stall."""
    stall = await stall_service.create(db, current_user.id, data)
    return StallResponse.model_validate(stall)


@router.patch("/{stall_id}", response_model=StallResponse)
async def update_stall(
    stall_id: UUID,
    data: StallUpdate,
    current_user: OwnerOrAdmin,
    db: DB,
) -> StallResponse:
    """Update a stall (owner or admin)."""
    stall = await stall_service.update(db, stall_id, data, current_user)
    return StallResponse.model_validate(stall)


@router.delete("/{stall_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_stall(stall_id: UUID, current_user: OwnerOrAdmin, db: DB) -> None:
    """Delete a stall that has never been booked."""
    await stall_service.delete(db, stall_id, current_user)

"""Stall and event registry service."""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from stallbook.core.exceptions import (
    AlreadyExistsError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from stallbook.core.permissions import ensure_authorized
from stallbook.domain.booking_state import StallStatus
from stallbook.models.booking import Booking
from stallbook.models.stall import Event, Stall
from stallbook.models.user import User
from stallbook.schemas.stall import EventCreate, SlotCreate, StallCreate, StallUpdate

logger = logging.getLogger(__name__)


def slot_name(event_name: str, slot_number: int) -> str:
    """Default display name for an event slot."""
    return f"{event_name} · Slot {slot_number}"


class StallService:
    """Service for stalls and the events that group them.

    Stall status is driven by the booking and payment services through
    ``set_status``; owners may also take a stall out of service by hand.
    """

    async def get(self, db: AsyncSession, stall_id: UUID) -> Stall:
        stall = await db.get(Stall, stall_id)
        if not stall:
            raise NotFoundError("Stall", str(stall_id))
        return stall

    async def list(
        self,
        db: AsyncSession,
        search: str | None = None,
        status: str | None = None,
        owner_id: UUID | None = None,
    ) -> list[Stall]:
        """List stalls, optionally filtered by text, status or owner."""
        query = select(Stall)
        if search and search.strip():
            term = f"%{search.strip()}%"
            query = query.where(or_(Stall.name.ilike(term), Stall.location.ilike(term)))
        if status:
            query = query.where(Stall.status == status)
        if owner_id:
            query = query.where(Stall.owner_id == owner_id)
        result = await db.execute(query.order_by(Stall.name))
        return list(result.scalars().all())

    async def create(self, db: AsyncSession, owner_id: UUID, data: StallCreate) -> Stall:
        """Register a standalone stall."""
        stall = Stall(
            owner_id=owner_id,
            status=StallStatus.AVAILABLE.value,
            **data.model_dump(),
        )
        db.add(stall)
        await db.commit()
        logger.info("Stall %s created by owner %s", stall.id, owner_id)
        return stall

    async def set_status(self, db: AsyncSession, stall_id: UUID, status: str | StallStatus) -> Stall:
        """Set the availability status of a stall."""
        try:
            value = StallStatus(status).value
        except ValueError:
            raise ValidationError(f"Unknown stall status: {status}")
        stall = await self.get(db, stall_id)
        stall.status = value
        await db.commit()
        return stall

    async def update(
        self,
        db: AsyncSession,
        stall_id: UUID,
        data: StallUpdate,
        caller: User,
    ) -> Stall:
        """Update stall details (owner or admin)."""
        stall = await self.get(db, stall_id)
        ensure_authorized(caller.id, caller.roles, stall.owner_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and field in ("name", "location", "rent_per_day", "status"):
                continue
            setattr(stall, field, value)

        await db.commit()
        return stall

    async def delete(self, db: AsyncSession, stall_id: UUID, caller: User) -> None:
        """Delete a stall that no booking references."""
        stall = await self.get(db, stall_id)
        ensure_authorized(caller.id, caller.roles, stall.owner_id)

        booking_count = await db.scalar(
            select(func.count()).select_from(Booking).where(Booking.stall_id == stall.id)
        )
        if booking_count:
            raise ConflictError("Cannot delete a stall that has bookings")

        if stall.event_id:
            event = await db.get(Event, stall.event_id)
            if event:
                event.total_slots = max(0, event.total_slots - 1)

        await db.delete(stall)
        await db.commit()
        logger.info("Stall %s deleted by %s", stall_id, caller.id)

    async def create_event(self, db: AsyncSession, owner_id: UUID, data: EventCreate) -> Event:
        """Create an event and generate its numbered slots."""
        event = Event(owner_id=owner_id, **data.model_dump())
        db.add(event)
        await db.flush()

        for slot_number in range(1, data.total_slots + 1):
            db.add(
                Stall(
                    owner_id=owner_id,
                    event_id=event.id,
                    slot_number=slot_number,
                    name=slot_name(event.name, slot_number),
                    location=event.location,
                    size=event.stall_size,
                    rent_per_day=event.slot_price,
                    description=event.description,
                    status=StallStatus.AVAILABLE.value,
                )
            )

        await db.commit()
        logger.info("Event %s created with %d slots", event.id, data.total_slots)
        return event

    async def add_slot(
        self,
        db: AsyncSession,
        event_id: UUID,
        owner_id: UUID,
        data: SlotCreate,
    ) -> Stall:
        """Add a numbered slot to an owner's event."""
        event = await db.get(Event, event_id)
        if not event or event.owner_id != owner_id:
            raise NotFoundError("Event", str(event_id))

        existing = await db.execute(
            select(Stall.id).where(
                Stall.event_id == event.id,
                Stall.slot_number == data.slot_number,
            )
        )
        if existing.scalar_one_or_none():
            raise AlreadyExistsError("This slot number already exists for the event")

        stall = Stall(
            owner_id=owner_id,
            event_id=event.id,
            slot_number=data.slot_number,
            name=_or_default(data.name, slot_name(event.name, data.slot_number)),
            location=_or_default(data.location, event.location),
            size=_or_default(data.size, event.stall_size),
            rent_per_day=(
                data.rent_per_day
                if data.rent_per_day is not None and data.rent_per_day > 0
                else event.slot_price
            ),
            description=data.description,
            status=data.status,
        )
        db.add(stall)
        event.total_slots += 1

        await db.commit()
        return stall

    async def list_events(self, db: AsyncSession, search: str | None = None) -> list[dict]:
        """List events by start date with total and available slot counts."""
        available = func.count(Stall.id).filter(Stall.status == StallStatus.AVAILABLE.value)
        query = (
            select(Event, func.count(Stall.id), available)
            .outerjoin(Stall, Stall.event_id == Event.id)
            .group_by(Event.id)
            .order_by(Event.start_date)
        )
        if search and search.strip():
            term = f"%{search.strip()}%"
            query = query.where(or_(Event.name.ilike(term), Event.location.ilike(term)))

        result = await db.execute(query)
        return [
            {"event": event, "slot_count": slot_count, "available_slots": available_count}
            for event, slot_count, available_count in result.all()
        ]

    async def get_event(self, db: AsyncSession, event_id: UUID) -> dict:
        """Get an event with its slots ordered by slot number."""
        event = await db.get(Event, event_id)
        if not event:
            raise NotFoundError("Event", str(event_id))

        result = await db.execute(
            select(Stall).where(Stall.event_id == event.id).order_by(Stall.slot_number)
        )
        slots = list(result.scalars().all())
        return {
            "event": event,
            "slots": slots,
            "slot_count": len(slots),
            "available_slots": sum(1 for s in slots if s.status == StallStatus.AVAILABLE.value),
        }


def _or_default(value: str | None, default: str | None) -> str | None:
    return value if value and value.strip() else default


# Singleton instance
stall_service = StallService()

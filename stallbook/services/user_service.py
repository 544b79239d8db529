"""User account service."""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from stallbook.core.exceptions import (
    AlreadyExistsError,
    AuthenticationError,
    ConflictError,
    NotFoundError,
)
from stallbook.core.permissions import UserRole
from stallbook.core.security import get_password_hash, verify_password
from stallbook.models.booking import Booking
from stallbook.models.stall import Event, Stall
from stallbook.models.user import StallOwnerApplication, User
from stallbook.schemas.user import UserAdminUpdate, UserCreate
from stallbook.services.application_service import application_service

logger = logging.getLogger(__name__)


class UserService:
    """Service for registration, sign-in and account administration."""

    async def get(self, db: AsyncSession, user_id: UUID) -> User:
        user = await db.get(User, user_id)
        if not user:
            raise NotFoundError("User", str(user_id))
        return user

    async def register(
        self,
        db: AsyncSession,
        data: UserCreate,
    ) -> tuple[User, StallOwnerApplication | None]:
        """Register a customer, or a stall owner applicant with a pending application."""
        email = data.email.lower()
        existing = await db.execute(select(User.id).where(func.lower(User.email) == email))
        if existing.scalar_one_or_none():
            raise AlreadyExistsError("Email already registered")

        is_applicant = data.user_type == UserRole.STALL_OWNER.value
        user = User(
            email=email,
            password_hash=get_password_hash(data.password),
            full_name=data.full_name,
            company_name=data.company_name,
            address=data.address,
            phone=data.phone,
            role=(UserRole.APPLICANT if is_applicant else UserRole.CUSTOMER).value,
            is_active=True,
        )
        db.add(user)
        await db.flush()

        application = None
        if is_applicant:
            application = await application_service.submit(
                db,
                user.id,
                document_url=data.document_url,
                notes=data.additional_notes,
                commit=False,
            )

        await db.commit()
        logger.info("User %s registered as %s", user.id, user.role)
        return user, application

    async def authenticate(self, db: AsyncSession, email: str, password: str) -> User:
        """Check credentials; inactive accounts cannot sign in."""
        result = await db.execute(select(User).where(func.lower(User.email) == email.lower()))
        user = result.scalar_one_or_none()
        if not user or not verify_password(password, user.password_hash):
            raise AuthenticationError("Invalid email or password")
        if not user.is_active:
            raise AuthenticationError("User account is deactivated")
        return user

    async def list(self, db: AsyncSession, role: str | None = None) -> list[User]:
        query = select(User)
        if role:
            query = query.where(User.role == role)
        result = await db.execute(query.order_by(User.full_name))
        return list(result.scalars().all())

    async def update(self, db: AsyncSession, user_id: UUID, data: UserAdminUpdate) -> User:
        """Change a user's profile, role or active flag."""
        user = await self.get(db, user_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and field in ("full_name", "role", "is_active"):
                continue
            setattr(user, field, value)
        await db.commit()
        return user

    async def delete(self, db: AsyncSession, user_id: UUID, caller: User) -> None:
        """Delete a user who owns no stalls and holds no bookings."""
        if user_id == caller.id:
            raise ConflictError("You cannot delete your own account")

        user = await self.get(db, user_id)

        for model, column in (
            (Stall, Stall.owner_id),
            (Event, Event.owner_id),
            (Booking, Booking.customer_id),
        ):
            count = await db.scalar(select(func.count()).select_from(model).where(column == user.id))
            if count:
                raise ConflictError("This user still has stalls, events or bookings")

        await db.execute(
            delete(StallOwnerApplication).where(StallOwnerApplication.user_id == user.id)
        )
        await db.execute(delete(User).where(User.id == user.id))
        await db.commit()
        logger.info("User %s deleted by %s", user_id, caller.id)


# Singleton instance
user_service = UserService()

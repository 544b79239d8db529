"""Stall owner application service."""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from stallbook.core.exceptions import AlreadyExistsError, IneligibleError, NotFoundError
from stallbook.core.permissions import UserRole
from stallbook.database import utcnow
from stallbook.domain.application_state import ApplicationStatus, assert_application_transition
from stallbook.models.user import StallOwnerApplication, User

logger = logging.getLogger(__name__)


class ApplicationService:
    """Service for the stall owner application workflow."""

    async def submit(
        self,
        db: AsyncSession,
        user_id: UUID,
        document_url: str | None = None,
        notes: str | None = None,
        commit: bool = True,
    ) -> StallOwnerApplication:
        """Submit an application for the stall owner role."""
        user = await db.get(User, user_id)
        if not user:
            raise NotFoundError("User", str(user_id))
        if user.role in (UserRole.STALL_OWNER.value, UserRole.ADMIN.value):
            raise IneligibleError("You already have stall owner access")

        pending = await db.execute(
            select(StallOwnerApplication.id).where(
                StallOwnerApplication.user_id == user_id,
                StallOwnerApplication.status == ApplicationStatus.PENDING.value,
            )
        )
        if pending.scalar_one_or_none():
            raise AlreadyExistsError("An application is already awaiting review")

        application = StallOwnerApplication(
            user_id=user_id,
            document_url=document_url,
            additional_notes=notes,
            status=ApplicationStatus.PENDING.value,
        )
        db.add(application)
        if commit:
            await db.commit()
        else:
            await db.flush()
        return application

    async def _get(self, db: AsyncSession, application_id: UUID) -> StallOwnerApplication:
        application = await db.get(StallOwnerApplication, application_id)
        if not application:
            raise NotFoundError("Application", str(application_id))
        return application

    async def approve(
        self,
        db: AsyncSession,
        application_id: UUID,
        reviewer: User,
    ) -> StallOwnerApplication:
        """Approve an application and grant the stall owner role."""
        application = await self._get(db, application_id)
        assert_application_transition(application.status, ApplicationStatus.APPROVED.value)

        application.status = ApplicationStatus.APPROVED.value
        application.reviewed_at = utcnow()
        application.reviewed_by = reviewer.id

        user = await db.get(User, application.user_id)
        if user and user.role != UserRole.ADMIN.value:
            user.role = UserRole.STALL_OWNER.value

        await db.commit()
        logger.info("Application %s approved by %s", application.id, reviewer.id)
        return application

    async def reject(
        self,
        db: AsyncSession,
        application_id: UUID,
        reviewer: User,
    ) -> StallOwnerApplication:
        """Reject an application; the applicant keeps their current role."""
        application = await self._get(db, application_id)
        assert_application_transition(application.status, ApplicationStatus.REJECTED.value)

        application.status = ApplicationStatus.REJECTED.value
        application.reviewed_at = utcnow()
        application.reviewed_by = reviewer.id

        await db.commit()
        logger.info("Application %s rejected by %s", application.id, reviewer.id)
        return application

    async def latest_for_user(self, db: AsyncSession, user_id: UUID) -> StallOwnerApplication | None:
        result = await db.execute(
            select(StallOwnerApplication)
            .where(StallOwnerApplication.user_id == user_id)
            .order_by(StallOwnerApplication.submitted_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def list(self, db: AsyncSession, status: str | None = None) -> list[dict]:
        """List applications, newest first, with applicant details."""
        query = select(StallOwnerApplication, User).join(
            User, User.id == StallOwnerApplication.user_id
        )
        if status:
            query = query.where(StallOwnerApplication.status == status)
        result = await db.execute(query.order_by(StallOwnerApplication.submitted_at.desc()))
        return [
            {
                "application": application,
                "applicant_name": user.full_name,
                "applicant_email": user.email,
                "company_name": user.company_name,
            }
            for application, user in result.all()
        ]


# Singleton instance
application_service = ApplicationService()

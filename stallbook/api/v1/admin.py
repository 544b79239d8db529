"""Admin endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from stallbook.api.deps import DB, Admin
from stallbook.schemas.reporting import AdminDashboard, PaymentReportItem, StallDetailReport
from stallbook.schemas.user import (
    ApplicationListItem,
    ApplicationResponse,
    UserAdminUpdate,
    UserResponse,
)
from stallbook.services.application_service import application_service
from stallbook.services.reporting_service import reporting_service
from stallbook.services.user_service import user_service

router = APIRouter()


@router.get("/dashboard", response_model=AdminDashboard)
async def get_dashboard(admin: Admin, db: DB) -> AdminDashboard:
    """Platform-wide counters."""
    return AdminDashboard(**await reporting_service.get_admin_dashboard(db))


# =============================================================================
# Users
# =============================================================================


@router.get("/users", response_model=list[UserResponse])
async def list_users(
    admin: Admin,
    db: DB,
    role: str | None = Query(None, pattern="^(customer|stall_owner|admin|applicant)$"),
) -> list[UserResponse]:
    """List users, optionally by role."""
    users = await user_service.list(db, role=role)
    return [UserResponse.model_validate(u) for u in users]


@router.patch("/users/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    data: UserAdminUpdate,
    admin: Admin,
    db: DB,
) -> UserResponse:
    """Change a user's role, profile or active flag."""
    return UserResponse.model_validate(await user_service.update(db, user_id, data))


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: UUID, admin: Admin, db: DB) -> None:
    """Delete a user account."""
    await user_service.delete(db, user_id, admin)


# =============================================================================
# Stall owner applications
# =============================================================================


@router.get("/applications", response_model=list[ApplicationListItem])
async def list_applications(
    admin: Admin,
    db: DB,
    status_filter: str | None = Query(None, alias="status", pattern="^(pending|approved|rejected)$"),
) -> list[ApplicationListItem]:
    """List stall owner applications."""
    rows = await application_service.list(db, status=status_filter)
    return [ApplicationListItem.model_validate(row, from_attributes=True) for row in rows]


@router.post("/applications/{application_id}/approve", response_model=ApplicationResponse)
async def approve_application(application_id: UUID, admin: Admin, db: DB) -> ApplicationResponse:
    """Approve an application and grant the stall owner role."""
    application = await application_service.approve(db, application_id, admin)
    return ApplicationResponse.model_validate(application)


@router.post("/applications/{application_id}/reject", response_model=ApplicationResponse)
async def reject_application(application_id: UUID, admin: Admin, db: DB) -> ApplicationResponse:
    """Reject an application."""
    application = await application_service.reject(db, application_id, admin)
    return ApplicationResponse.model_validate(application)


# =============================================================================
# Reports
# =============================================================================


@router.get("/stalls/{stall_id}", response_model=StallDetailReport)
async def get_stall_detail(stall_id: UUID, admin: Admin, db: DB) -> StallDetailReport:
    """Booking history, revenue and ratings for a stall."""
    return StallDetailReport(**await reporting_service.get_stall_detail(db, stall_id))


@router.get("/payments", response_model=list[PaymentReportItem])
async def get_payment_report(admin: Admin, db: DB) -> list[PaymentReportItem]:
    """Every payment attempt, newest first."""
    rows = await reporting_service.get_payment_report(db)
    return [PaymentReportItem(**row) for row in rows]

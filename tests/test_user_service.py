import pytest
from pydantic import ValidationError as SchemaValidationError

from stallbook.core.exceptions import (
    AlreadyExistsError,
    AuthenticationError,
    ConflictError,
    IneligibleError,
    ValidationError,
)
from stallbook.core.security import verify_password
from stallbook.schemas.user import UserAdminUpdate, UserCreate
from stallbook.services.application_service import application_service
from stallbook.services.user_service import user_service
from tests.conftest import days_from_now


def registration(**overrides) -> UserCreate:
    values = {
        "email": "Priya@Example.com",
        "password": "stalls2024",
        "full_name": "Priya Shah",
        "company_name": "Shah Crafts",
        "phone": "+91 98765 43210",
    }
    values.update(overrides)
    return UserCreate(**values)


@pytest.mark.asyncio
async def test_register_customer(db):
    user, application = await user_service.register(db, registration())

    assert user.role == "customer"
    assert user.email == "priya@example.com"
    assert application is None
    assert verify_password("stalls2024", user.password_hash)


@pytest.mark.asyncio
async def test_register_stall_owner_creates_pending_application(db):
    user, application = await user_service.register(
        db, registration(user_type="stall_owner", document_url="https://docs.example/gst.pdf")
    )

    assert user.role == "applicant"
    assert application.status == "pending"
    assert application.user_id == user.id
    assert application.document_url == "https://docs.example/gst.pdf"


@pytest.mark.asyncio
async def test_register_duplicate_email_ignores_case(db):
    await user_service.register(db, registration())

    with pytest.raises(AlreadyExistsError):
        await user_service.register(db, registration(email="PRIYA@example.com"))


def test_weak_password_is_refused():
    with pytest.raises(SchemaValidationError):
        registration(password="onlyletters")
    with pytest.raises(SchemaValidationError):
        registration(password="short1")


@pytest.mark.asyncio
async def test_authenticate(db):
    await user_service.register(db, registration())

    user = await user_service.authenticate(db, "PRIYA@example.com", "stalls2024")
    assert user.full_name == "Priya Shah"

    with pytest.raises(AuthenticationError):
        await user_service.authenticate(db, "priya@example.com", "wrongpass1")


@pytest.mark.asyncio
async def test_deactivated_user_cannot_sign_in(db):
    user, _ = await user_service.register(db, registration())
    await user_service.update(db, user.id, UserAdminUpdate(is_active=False))

    with pytest.raises(AuthenticationError, match="deactivated"):
        await user_service.authenticate(db, "priya@example.com", "stalls2024")


@pytest.mark.asyncio
async def test_approving_application_grants_owner_role(db, admin):
    user, application = await user_service.register(db, registration(user_type="stall_owner"))

    approved = await application_service.approve(db, application.id, admin)

    assert approved.status == "approved"
    assert approved.reviewed_by == admin.id
    assert approved.reviewed_at is not None
    assert user.role == "stall_owner"


@pytest.mark.asyncio
async def test_rejecting_application_keeps_role(db, admin):
    user, application = await user_service.register(db, registration(user_type="stall_owner"))

    rejected = await application_service.reject(db, application.id, admin)

    assert rejected.status == "rejected"
    assert user.role == "applicant"
    with pytest.raises(ValidationError):
        await application_service.approve(db, application.id, admin)


@pytest.mark.asyncio
async def test_resubmission_after_rejection(db, admin):
    user, application = await user_service.register(db, registration(user_type="stall_owner"))

    with pytest.raises(AlreadyExistsError):
        await application_service.submit(db, user.id)

    await application_service.reject(db, application.id, admin)
    second = await application_service.submit(db, user.id, notes="Added GST certificate")

    assert second.status == "pending"
    latest = await application_service.latest_for_user(db, user.id)
    assert latest.id in {application.id, second.id}
    assert len(await application_service.list(db, status="pending")) == 1


@pytest.mark.asyncio
async def test_owner_cannot_apply_again(db, owner):
    with pytest.raises(IneligibleError):
        await application_service.submit(db, owner.id)


@pytest.mark.asyncio
async def test_list_users_by_role(db, customer, owner, admin):
    assert [u.id for u in await user_service.list(db, role="stall_owner")] == [owner.id]
    assert len(await user_service.list(db)) == 3


@pytest.mark.asyncio
async def test_admin_cannot_delete_self(db, admin):
    with pytest.raises(ConflictError):
        await user_service.delete(db, admin.id, admin)


@pytest.mark.asyncio
async def test_user_with_bookings_cannot_be_deleted(db, admin, stall, customer, make_booking):
    await make_booking(stall, customer, days_from_now(1), days_from_now(2))

    with pytest.raises(ConflictError):
        await user_service.delete(db, customer.id, admin)


@pytest.mark.asyncio
async def test_owner_with_stalls_cannot_be_deleted(db, admin, stall, owner):
    with pytest.raises(ConflictError):
        await user_service.delete(db, owner.id, admin)


@pytest.mark.asyncio
async def test_delete_applicant_removes_application(db, admin):
    user, application = await user_service.register(db, registration(user_type="stall_owner"))

    await user_service.delete(db, user.id, admin)

    assert await application_service.latest_for_user(db, user.id) is None
    assert [u.id for u in await user_service.list(db)] == [admin.id]

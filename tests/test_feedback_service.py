import pytest

from stallbook.core.exceptions import (
    AlreadyExistsError,
    IneligibleError,
    NotFoundError,
    ValidationError,
)
from stallbook.services.feedback_service import feedback_service
from tests.conftest import days_from_now


@pytest.fixture
def finished_booking(make_booking, stall, customer):
    async def _finished(**overrides):
        values = {"status": "approved", "payment_status": "completed"}
        values.update(overrides)
        return await make_booking(stall, customer, days_from_now(-4), days_from_now(-2), **values)

    return _finished


@pytest.mark.asyncio
async def test_feedback_on_paid_finished_booking(db, finished_booking, customer):
    booking = await finished_booking()

    feedback = await feedback_service.submit(db, booking.id, customer.id, 5, "Great footfall")

    assert feedback.booking_id == booking.id
    assert feedback.rating == 5
    assert feedback.comments == "Great footfall"
    assert feedback.submitted_at is not None


@pytest.mark.asyncio
async def test_feedback_allows_comment_without_rating(db, finished_booking, customer):
    booking = await finished_booking()

    feedback = await feedback_service.submit(db, booking.id, customer.id, None, "No rating")

    assert feedback.rating is None


@pytest.mark.asyncio
async def test_feedback_only_once_per_booking(db, finished_booking, customer):
    booking = await finished_booking()
    await feedback_service.submit(db, booking.id, customer.id, 4, None)

    with pytest.raises(AlreadyExistsError):
        await feedback_service.submit(db, booking.id, customer.id, 2, None)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [{"payment_status": "pending"}, {"status": "pending"}, {"status": "cancelled", "payment_status": "failed"}],
)
async def test_feedback_requires_paid_approved_booking(db, finished_booking, customer, overrides):
    booking = await finished_booking(**overrides)

    with pytest.raises(IneligibleError):
        await feedback_service.submit(db, booking.id, customer.id, 5, None)


@pytest.mark.asyncio
async def test_feedback_waits_until_booking_has_ended(db, make_booking, stall, customer):
    booking = await make_booking(
        stall, customer, days_from_now(-1), days_from_now(1), status="approved", payment_status="completed"
    )

    with pytest.raises(IneligibleError):
        await feedback_service.submit(db, booking.id, customer.id, 5, None)


@pytest.mark.asyncio
async def test_feedback_on_booking_ending_today_is_allowed(db, make_booking, stall, customer):
    booking = await make_booking(
        stall, customer, days_from_now(-1), days_from_now(0), status="approved", payment_status="completed"
    )

    feedback = await feedback_service.submit(db, booking.id, customer.id, 3, None)

    assert feedback.rating == 3


@pytest.mark.asyncio
async def test_feedback_from_another_customer_is_not_found(db, finished_booking, make_user):
    booking = await finished_booking()
    other = await make_user("customer")

    with pytest.raises(NotFoundError):
        await feedback_service.submit(db, booking.id, other.id, 5, None)


@pytest.mark.asyncio
async def test_rating_out_of_range_is_rejected(db, finished_booking, customer):
    booking = await finished_booking()

    with pytest.raises(ValidationError):
        await feedback_service.submit(db, booking.id, customer.id, 6, None)


@pytest.mark.asyncio
async def test_owner_sees_feedback_on_own_stalls(db, finished_booking, owner, customer, make_user):
    booking = await finished_booking()
    await feedback_service.submit(db, booking.id, customer.id, 4, "Good")

    items = await feedback_service.list_for_owner(db, owner.id)
    assert len(items) == 1
    assert items[0]["customer_name"] == customer.full_name
    assert items[0]["stall_name"] == "Corner Stall"

    other_owner = await make_user("stall_owner")
    assert await feedback_service.list_for_owner(db, other_owner.id) == []

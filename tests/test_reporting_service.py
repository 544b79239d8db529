from datetime import UTC, datetime, timedelta
from decimal import Decimal
from uuid import uuid4

import pytest

from stallbook.models.feedback import Feedback
from stallbook.models.payment import Payment
from stallbook.services.reporting_service import preferred_payment, reporting_service
from tests.conftest import days_from_now


def payment(status: str, minutes_ago: int, reference: str) -> Payment:
    return Payment(
        booking_id=uuid4(),
        amount=Decimal("100.00"),
        status=status,
        transaction_reference=reference,
        processed_at=datetime.now(UTC) - timedelta(minutes=minutes_ago),
    )


def test_preferred_payment_favours_completed_attempt():
    completed = payment("completed", 30, "pay_ok")
    newer_failed = payment("failed", 5, "pay_failed")

    assert preferred_payment([newer_failed, completed]) is completed


def test_preferred_payment_falls_back_to_newest():
    older = payment("failed", 30, "pay_old")
    newer = payment("pending", 5, "order_new")

    assert preferred_payment([older, newer]) is newer
    assert preferred_payment([]) is None


def test_preferred_payment_handles_naive_timestamps():
    naive = payment("failed", 0, "pay_naive")
    naive.processed_at = datetime.now() + timedelta(days=1)
    aware = payment("failed", 5, "pay_aware")

    assert preferred_payment([aware, naive]) is naive


@pytest.fixture
def seeded(db, owner, customer, make_stall, make_booking):
    async def _seed():
        first = await make_stall(owner, name="Alpha", rent_per_day=Decimal("100.00"))
        second = await make_stall(owner, name="Beta", rent_per_day=Decimal("50.00"), status="maintenance")

        paid = await make_booking(
            first, customer, days_from_now(-3), days_from_now(-2), status="approved", payment_status="completed"
        )
        upcoming = await make_booking(
            first, customer, days_from_now(5), days_from_now(6), status="approved", payment_status="completed"
        )
        pending = await make_booking(second, customer, days_from_now(8), days_from_now(9))

        db.add_all(
            [
                Payment(booking_id=paid.id, amount=Decimal("200.00"), status="failed", transaction_reference="pay_f"),
                Payment(booking_id=paid.id, amount=Decimal("200.00"), status="completed", transaction_reference="pay_a"),
                Payment(booking_id=upcoming.id, amount=Decimal("200.00"), status="completed", transaction_reference="pay_b"),
                Payment(booking_id=pending.id, amount=Decimal("100.00"), status="pending", transaction_reference="order_c"),
                Feedback(booking_id=paid.id, rating=4, comments="Busy weekend"),
            ]
        )
        await db.commit()
        return first, second, paid, upcoming, pending

    return _seed


@pytest.mark.asyncio
async def test_admin_dashboard_counts(db, seeded, admin):
    await seeded()

    dashboard = await reporting_service.get_admin_dashboard(db)

    assert dashboard["total_users"] == 3
    assert dashboard["active_customers"] == 1
    assert dashboard["active_owners"] == 1
    assert dashboard["total_stalls"] == 2
    assert dashboard["available_stalls"] == 1
    assert dashboard["pending_bookings"] == 1
    assert dashboard["pending_owner_applications"] == 0
    assert dashboard["total_revenue"] == Decimal("400.00")
    assert dashboard["failed_payments"] == 1
    assert dashboard["total_payments"] == 4


@pytest.mark.asyncio
async def test_owner_dashboard(db, seeded, owner):
    first, second, paid, upcoming, pending = await seeded()

    dashboard = await reporting_service.get_owner_dashboard(db, owner.id)

    assert dashboard["stall_count"] == 2
    assert dashboard["pending_bookings"] == 1
    assert dashboard["upcoming_bookings"] == 1
    assert dashboard["total_revenue"] == Decimal("400.00")

    alpha = next(s for s in dashboard["stall_summaries"] if s["name"] == "Alpha")
    assert alpha["total_bookings"] == 2
    assert alpha["total_revenue"] == Decimal("400.00")
    assert alpha["average_rating"] == 4.0
    assert alpha["review_count"] == 1
    assert alpha["next_booking"]["booking_id"] == upcoming.id
    assert alpha["next_booking"]["payment_reference"] == "pay_b"

    beta = next(s for s in dashboard["stall_summaries"] if s["name"] == "Beta")
    assert beta["pending_requests"] == 1
    assert beta["average_rating"] is None
    assert beta["next_booking"] is None

    assert [f["comments"] for f in dashboard["recent_feedback"]] == ["Busy weekend"]


@pytest.mark.asyncio
async def test_owner_dashboard_without_stalls(db, make_user):
    newcomer = await make_user("stall_owner")

    dashboard = await reporting_service.get_owner_dashboard(db, newcomer.id)

    assert dashboard["stall_count"] == 0
    assert dashboard["total_revenue"] == Decimal("0.00")
    assert dashboard["stall_summaries"] == []


@pytest.mark.asyncio
async def test_stall_detail_prefers_completed_payment(db, seeded, owner):
    first, second, paid, upcoming, pending = await seeded()

    detail = await reporting_service.get_stall_detail(db, first.id)

    assert detail["owner_email"] == owner.email
    assert detail["total_bookings"] == 2
    history = {row["booking_id"]: row for row in detail["booking_history"]}
    assert history[paid.id]["payment_reference"] == "pay_a"
    assert history[paid.id]["amount"] == Decimal("200.00")
    assert detail["feedback"][0]["rating"] == 4


@pytest.mark.asyncio
async def test_payment_report_lists_every_attempt(db, seeded, customer):
    await seeded()

    report = await reporting_service.get_payment_report(db)

    assert len(report) == 4
    assert {row["customer_name"] for row in report} == {customer.full_name}
    assert {row["stall_name"] for row in report} == {"Alpha", "Beta"}

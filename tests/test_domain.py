from datetime import date, datetime
from decimal import Decimal
from uuid import uuid4

import pytest

from stallbook.core.exceptions import AuthorizationError, ValidationError
from stallbook.core.permissions import ensure_authorized, is_authorized
from stallbook.domain.application_state import assert_application_transition
from stallbook.domain.booking_state import assert_booking_transition
from stallbook.domain.payment_state import assert_payment_transition
from stallbook.domain.pricing import (
    average_rating,
    booking_days,
    calculate_amount,
    from_minor_units,
    round_money,
    to_minor_units,
)
from stallbook.services.payment_service import build_receipt


def test_amount_counts_both_ends():
    assert booking_days(date(2024, 1, 1), date(2024, 1, 3)) == 3
    assert calculate_amount(date(2024, 1, 1), date(2024, 1, 3), Decimal("100")) == Decimal("300")


def test_single_day_booking_is_charged_one_day():
    assert calculate_amount(date(2024, 1, 1), date(2024, 1, 1), 100) == Decimal("100")


def test_reversed_range_is_charged_minimum_one_day():
    assert booking_days(date(2024, 1, 5), date(2024, 1, 1)) == 1


def test_money_rounds_half_up():
    assert round_money(Decimal("2.345")) == Decimal("2.35")
    assert round_money(Decimal("2.344")) == Decimal("2.34")
    assert round_money(None) == Decimal("0.00")


def test_minor_units():
    assert to_minor_units(Decimal("300")) == 30000
    assert to_minor_units(Decimal("10.005")) == 1001
    assert from_minor_units(30050) == Decimal("300.50")


def test_average_rating_ignores_missing_ratings():
    assert average_rating([4, 5, None]) == 4.5
    assert average_rating([4, 4, 5, 4]) == 4.3
    assert average_rating([None]) is None
    assert average_rating([]) is None


def test_receipt_fits_gateway_limit():
    booking_id = uuid4()
    receipt = build_receipt(booking_id, datetime(2026, 1, 1))
    assert receipt.startswith(f"BK-{booking_id.hex[:16]}-")
    assert len(receipt) <= 40


@pytest.mark.parametrize(
    "current,target",
    [("pending", "approved"), ("pending", "rejected"), ("pending", "cancelled"), ("approved", "cancelled")],
)
def test_allowed_booking_transitions(current, target):
    assert_booking_transition(current, target)


@pytest.mark.parametrize(
    "current,target",
    [("rejected", "approved"), ("cancelled", "pending"), ("approved", "rejected")],
)
def test_rejected_booking_transitions(current, target):
    with pytest.raises(ValidationError):
        assert_booking_transition(current, target)


def test_settled_payments_are_final():
    assert_payment_transition("pending", "completed")
    with pytest.raises(ValidationError):
        assert_payment_transition("completed", "failed")
    with pytest.raises(ValidationError):
        assert_payment_transition("failed", "completed")


def test_application_is_reviewed_once():
    assert_application_transition("pending", "approved")
    with pytest.raises(ValidationError):
        assert_application_transition("rejected", "approved")


def test_owner_and_admin_are_authorized():
    owner_id, admin_id, other_id = uuid4(), uuid4(), uuid4()

    assert is_authorized(owner_id, [], owner_id)
    assert is_authorized(admin_id, ["admin"], owner_id)
    assert not is_authorized(other_id, ["customer"], owner_id)


def test_admin_override_can_be_disabled():
    owner_id, admin_id = uuid4(), uuid4()

    assert not is_authorized(admin_id, ["admin"], owner_id, admin_override=False)
    with pytest.raises(AuthorizationError, match="owner only"):
        ensure_authorized(admin_id, ["admin"], owner_id, admin_override=False, detail="owner only")

"""Rent calculation and decimal rounding rules.

- A booking is charged per calendar day, both ends inclusive, minimum one day.
- Money rounds half away from zero to 2 places, ratings to 1 place.
- Gateways receive amounts in minor units (amount x 100, half away from zero).
"""

from collections.abc import Iterable
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

MONEY_QUANTUM = Decimal("0.01")
RATING_QUANTUM = Decimal("0.1")


def booking_days(start_date: date, end_date: date) -> int:
    """Number of chargeable days in an inclusive date range (at least 1)."""
    return max((end_date - start_date).days + 1, 1)


def calculate_amount(start_date: date, end_date: date, rent_per_day: Decimal | int | str) -> Decimal:
    """Rent owed for a stall between two dates.

    Examples:
        2024-01-01 .. 2024-01-03 at 100/day -> 300
        2024-01-01 .. 2024-01-01 at 100/day -> 100
    """
    return Decimal(booking_days(start_date, end_date)) * Decimal(str(rent_per_day))


def round_money(value: Decimal | int | float | None) -> Decimal:
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def round_rating(value: Decimal | float) -> float:
    return float(Decimal(str(value)).quantize(RATING_QUANTUM, rounding=ROUND_HALF_UP))


def to_minor_units(amount: Decimal | int | str) -> int:
    """Convert a major-unit amount to the integer minor units a gateway expects."""
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(amount: int) -> Decimal:
    return (Decimal(amount) / 100).quantize(MONEY_QUANTUM)


def average_rating(ratings: Iterable[int | None]) -> float | None:
    """Mean of the non-null ratings rounded to one decimal, None when there are none."""
    values = [r for r in ratings if r is not None]
    if not values:
        return None
    return round_rating(Decimal(sum(values)) / Decimal(len(values)))

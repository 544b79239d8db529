"""Payment state machine."""

from enum import Enum

from stallbook.core.exceptions import ValidationError


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


PAYMENT_TRANSITIONS = {
    "pending": {"completed", "failed"},
    "completed": set(),
    "failed": set(),
}


def assert_payment_transition(current: str, target: str) -> None:
    allowed = PAYMENT_TRANSITIONS.get(current, set())
    if target not in allowed:
        raise ValidationError(
            f"Invalid payment transition: {current} → {target}"
        )

"""Stall owner application state machine.

States: pending → approved | rejected
"""

from enum import Enum

from stallbook.core.exceptions import ValidationError


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


APPLICATION_TRANSITIONS: dict[str, set[str]] = {
    "pending": {"approved", "rejected"},
    "approved": set(),
    "rejected": set(),
}


def assert_application_transition(current_status: str, new_status: str) -> None:
    """Validate application state transition."""
    allowed = APPLICATION_TRANSITIONS.get(current_status, set())
    if new_status not in allowed:
        raise ValidationError(f"Invalid application transition: {current_status} → {new_status}")

"""Role-based access control and ownership checks."""

from collections.abc import Iterable
from enum import Enum
from uuid import UUID

from stallbook.core.exceptions import AuthorizationError


class UserRole(str, Enum):
    """User roles in the system."""

    CUSTOMER = "customer"
    STALL_OWNER = "stall_owner"
    ADMIN = "admin"
    APPLICANT = "applicant"  # stall owner application awaiting review


def is_authorized(
    caller_id: UUID,
    caller_roles: Iterable[str],
    resource_owner_id: UUID,
    *,
    admin_override: bool = True,
) -> bool:
    """Decide whether the caller may act on a resource owned by another user.

    Owners may always act on their own resources. Admins may act on any
    resource unless ``admin_override`` is disabled for the operation.
    """
    if caller_id == resource_owner_id:
        return True
    roles = {str(getattr(r, "value", r)) for r in caller_roles}
    return admin_override and UserRole.ADMIN.value in roles


def ensure_authorized(
    caller_id: UUID,
    caller_roles: Iterable[str],
    resource_owner_id: UUID,
    *,
    admin_override: bool = True,
    detail: str | None = None,
) -> None:
    """Raise AuthorizationError unless ``is_authorized`` allows the caller."""
    if not is_authorized(
        caller_id, caller_roles, resource_owner_id, admin_override=admin_override
    ):
        raise AuthorizationError(detail) if detail else AuthorizationError()

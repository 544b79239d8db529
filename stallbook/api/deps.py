"""API dependencies for authentication and common operations."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from stallbook.core.exceptions import AuthenticationError, AuthorizationError
from stallbook.core.permissions import UserRole
from stallbook.core.security import verify_token
from stallbook.database import get_db
from stallbook.models.user import User
from stallbook.services.payment_service import PaymentService, payment_service

# Security scheme
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Get the current authenticated user from JWT token."""
    if not credentials:
        raise AuthenticationError("Not authenticated")

    payload = verify_token(credentials.credentials, token_type="access")
    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Invalid token payload")

    try:
        user_uuid = UUID(user_id)
    except ValueError:
        raise AuthenticationError("Invalid token payload")

    user = await db.get(User, user_uuid)
    if not user:
        raise AuthenticationError("User not found")
    if not user.is_active:
        raise AuthenticationError("User account is deactivated")

    return user


class RoleChecker:
    """Require one of the given roles."""

    def __init__(self, *roles: UserRole, detail: str = "Access denied"):
        self.roles = {role.value for role in roles}
        self.detail = detail

    async def __call__(
        self,
        current_user: Annotated[User, Depends(get_current_user)],
    ) -> User:
        if current_user.role not in self.roles:
            raise AuthorizationError(self.detail)
        return current_user


# Convenience instances
require_customer = RoleChecker(UserRole.CUSTOMER, detail="Customer access required")
require_owner = RoleChecker(UserRole.STALL_OWNER, detail="Stall owner access required")
require_owner_or_admin = RoleChecker(
    UserRole.STALL_OWNER, UserRole.ADMIN, detail="Stall owner access required"
)
require_admin = RoleChecker(UserRole.ADMIN, detail="Admin access required")


def get_payment_service() -> PaymentService:
    """Payment service used by the payment routes."""
    return payment_service


CurrentUser = Annotated[User, Depends(get_current_user)]
Customer = Annotated[User, Depends(require_customer)]
Owner = Annotated[User, Depends(require_owner)]
OwnerOrAdmin = Annotated[User, Depends(require_owner_or_admin)]
Admin = Annotated[User, Depends(require_admin)]
DB = Annotated[AsyncSession, Depends(get_db)]

"""Core utilities and security modules."""

from stallbook.core.exceptions import (
    AlreadyExistsError,
    AppException,
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DatesNotAvailable,
    GatewayError,
    GatewayUnconfigured,
    IneligibleError,
    InvalidDateRange,
    NotFoundError,
    PaymentVerificationFailed,
    ValidationError,
)
from stallbook.core.security import (
    create_access_token,
    get_password_hash,
    verify_password,
    verify_token,
)

__all__ = [
    "AlreadyExistsError",
    "AppException",
    "AuthenticationError",
    "AuthorizationError",
    "ConflictError",
    "DatesNotAvailable",
    "GatewayError",
    "GatewayUnconfigured",
    "IneligibleError",
    "InvalidDateRange",
    "NotFoundError",
    "PaymentVerificationFailed",
    "ValidationError",
    "create_access_token",
    "get_password_hash",
    "verify_password",
    "verify_token",
]

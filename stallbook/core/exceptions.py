"""Custom application exceptions."""

from typing import Any

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception."""

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class ValidationError(AppException):
    """Validation error exception."""

    def __init__(self, detail: str = "Validation failed", errors: list[dict[str, Any]] | None = None) -> None:
        self.errors = errors
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)


class NotFoundError(AppException):
    """Resource not found exception."""

    def __init__(self, resource: str = "Resource", identifier: str | None = None) -> None:
        detail = f"{resource} not found"
        if identifier:
            detail = f"{resource} with ID '{identifier}' not found"
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class AuthenticationError(AppException):
    """Authentication failed exception."""

    def __init__(self, detail: str = "Authentication failed") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AuthorizationError(AppException):
    """Authorization denied exception."""

    def __init__(self, detail: str = "You don't have permission to access this resource") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class InvalidDateRange(AppException):
    """Booking dates are reversed or start in the past."""

    def __init__(self, detail: str = "End date should be on or after the start date") -> None:
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)


class DatesNotAvailable(AppException):
    """Dates not available exception."""

    def __init__(self, detail: str = "The stall is already booked for the selected dates") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class IneligibleError(AppException):
    """Operation not allowed for the current booking state."""

    def __init__(self, detail: str = "This operation is not allowed for the current booking status") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class AlreadyExistsError(AppException):
    """Entity already exists."""

    def __init__(self, detail: str = "This record already exists") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ConflictError(AppException):
    """Operation conflicts with dependent records."""

    def __init__(self, detail: str = "This operation conflicts with existing records") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class GatewayUnconfigured(AppException):
    """Payment gateway credentials are missing."""

    def __init__(self, detail: str = "Payment gateway is not configured. Please contact support.") -> None:
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)


class GatewayError(AppException):
    """Payment gateway call failed."""

    def __init__(self, detail: str = "We couldn't start the payment. Please try again in a moment.") -> None:
        super().__init__(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)


class PaymentVerificationFailed(AppException):
    """Gateway signature could not be verified."""

    def __init__(self, detail: str = "Payment verification failed. No charges were captured.") -> None:
        super().__init__(status_code=status.HTTP_402_PAYMENT_REQUIRED, detail=detail)

"""Authentication endpoints."""

from fastapi import APIRouter, status

from stallbook.api.deps import DB, CurrentUser
from stallbook.core.exceptions import NotFoundError
from stallbook.core.security import create_token_response
from stallbook.schemas.user import (
    ApplicationCreate,
    ApplicationResponse,
    RegistrationResponse,
    TokenResponse,
    UserCreate,
    UserLogin,
    UserResponse,
)
from stallbook.services.application_service import application_service
from stallbook.services.user_service import user_service

router = APIRouter()


@router.post("/register", response_model=RegistrationResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, db: DB) -> RegistrationResponse:
    """Register a new account.

    Customers get a token straight away; stall owners wait for their
    application to be approved.
    """
    user, application = await user_service.register(db, user_data)
    token = None
    if application is None:
        token = create_token_response(str(user.id), user.email, user.role)["access_token"]
    return RegistrationResponse(
        user=UserResponse.model_validate(user),
        access_token=token,
        application_id=application.id if application else None,
    )


@router.post("/login", response_model=TokenResponse)
async def login(credentials: UserLogin, db: DB) -> TokenResponse:
    """Login with email and password."""
    user = await user_service.authenticate(db, credentials.email, credentials.password)
    return TokenResponse(**create_token_response(str(user.id), user.email, user.role))


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: CurrentUser) -> UserResponse:
    """Get the current user's profile."""
    return UserResponse.model_validate(current_user)


@router.get("/application", response_model=ApplicationResponse)
async def get_my_application(current_user: CurrentUser, db: DB) -> ApplicationResponse:
    """Get the status of the current user's latest stall owner application."""
    application = await application_service.latest_for_user(db, current_user.id)
    if not application:
        raise NotFoundError("Application")
    return ApplicationResponse.model_validate(application)


@router.post("/application", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
async def submit_application(
    data: ApplicationCreate,
    current_user: CurrentUser,
    db: DB,
) -> ApplicationResponse:
    """Apply to become a stall owner."""
    application = await application_service.submit(
        db, current_user.id, document_url=data.document_url, notes=data.additional_notes
    )
    return ApplicationResponse.model_validate(application)

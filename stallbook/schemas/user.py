"""User-related Pydantic schemas."""

import re
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class UserBase(BaseModel):
    """Base user schema."""

    email: EmailStr
    full_name: str = Field(..., min_length=1, max_length=128)
    company_name: str | None = Field(None, max_length=128)
    address: str | None = Field(None, max_length=256)
    phone: str | None = None

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str | None) -> str | None:
        if v is None:
            return v
        pattern = r"^\+?[0-9 \-]{7,20}$"
        if not re.match(pattern, v):
            raise ValueError("Phone must contain 7 to 20 digits")
        return v


class UserCreate(UserBase):
    """Schema for user registration.

    Stall owners register as applicants and get a pending application.
    """

    password: str = Field(..., min_length=8, max_length=64)
    user_type: str = Field(default="customer", pattern="^(customer|stall_owner)$")
    document_url: str | None = Field(None, max_length=256)
    additional_notes: str | None = Field(None, max_length=256)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if not re.search(r"[A-Za-z]", v):
            raise ValueError("Password must contain at least one letter")
        if not re.search(r"\d", v):
            raise ValueError("Password must contain at least one digit")
        return v


class UserLogin(BaseModel):
    """Schema for user login."""

    email: EmailStr
    password: str


class UserAdminUpdate(BaseModel):
    """Schema for admin changes to a user account."""

    full_name: str | None = Field(None, min_length=1, max_length=128)
    company_name: str | None = Field(None, max_length=128)
    role: str | None = Field(None, pattern="^(customer|stall_owner|admin|applicant)$")
    is_active: bool | None = None


class UserResponse(BaseModel):
    """Schema for user response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    full_name: str
    company_name: str | None
    address: str | None
    phone: str | None
    role: str
    is_active: bool
    created_at: datetime


class TokenResponse(BaseModel):
    """Schema for authentication token response."""

    access_token: str
    token_type: str = "bearer"


class RegistrationResponse(BaseModel):
    """Registration result; customers are signed in straight away."""

    user: UserResponse
    access_token: str | None = None
    application_id: UUID | None = None


class ApplicationCreate(BaseModel):
    """Schema for submitting a stall owner application."""

    document_url: str | None = Field(None, max_length=256)
    additional_notes: str | None = Field(None, max_length=256)


class ApplicationResponse(BaseModel):
    """Schema for stall owner application response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    document_url: str | None
    additional_notes: str | None
    status: str
    submitted_at: datetime
    reviewed_at: datetime | None
    reviewed_by: UUID | None


class ApplicationListItem(BaseModel):
    """Application row with applicant details for admins."""

    application: ApplicationResponse
    applicant_name: str
    applicant_email: str
    company_name: str | None = None

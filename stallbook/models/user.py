"""User-related database models."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from stallbook.database import Base, utcnow

if TYPE_CHECKING:
    from stallbook.models.stall import Event, Stall


class User(Base):
    """User account model."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default="customer"
    )  # customer, stall_owner, admin, applicant

    # Profile
    full_name: Mapped[str] = mapped_column(String(128), nullable=False)
    company_name: Mapped[str | None] = mapped_column(String(128))
    address: Mapped[str | None] = mapped_column(String(256))
    phone: Mapped[str | None] = mapped_column(String(20))

    # Status
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now()
    )

    # Relationships
    stalls: Mapped[list["Stall"]] = relationship("Stall", back_populates="owner")
    events: Mapped[list["Event"]] = relationship("Event", back_populates="owner")
    applications: Mapped[list["StallOwnerApplication"]] = relationship(
        "StallOwnerApplication",
        back_populates="user",
        cascade="all, delete-orphan",
        foreign_keys="[StallOwnerApplication.user_id]",
    )

    @property
    def roles(self) -> frozenset[str]:
        """Role set consumed by authorization checks."""
        return frozenset({self.role})


class StallOwnerApplication(Base):
    """Request from a user to become a stall owner."""

    __tablename__ = "stall_owner_applications"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    document_url: Mapped[str | None] = mapped_column(String(256))
    additional_notes: Mapped[str | None] = mapped_column(Text)

    # Status: pending, approved, rejected
    status: Mapped[str] = mapped_column(String(20), default="pending", index=True)

    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    reviewed_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL")
    )

    # Relationships
    user: Mapped["User"] = relationship(
        "User", back_populates="applications", foreign_keys=[user_id]
    )

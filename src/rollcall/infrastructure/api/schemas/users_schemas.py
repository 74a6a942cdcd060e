"""Pydantic schemas for user signup and user management."""

from datetime import datetime

from pydantic import EmailStr, Field, field_validator

from rollcall.domain.services.input_sanitizer import validate_email
from rollcall.infrastructure.api.schemas.base import CamelModel


class EmailInput(CamelModel):
    """Shared email handling: normalized, pattern-checked, then EmailStr."""

    email: EmailStr = Field(..., description="User email address")

    @field_validator("email", mode="before")
    @classmethod
    def sanitize_email(cls, v: object) -> object:
        if isinstance(v, str):
            return validate_email(v)
        return v


class UserCreateRequest(EmailInput):
    """Request body for signup."""


class UserUpdateRequest(EmailInput):
    """Request body for changing a user's email."""


class AccountResponse(CamelModel):
    """Account embedded in user responses."""

    id: int
    created_at: datetime
    updated_at: datetime


class UserResponse(CamelModel):
    """User as returned by the API. The credential is never included."""

    id: int = Field(..., description="User ID")
    account_id: int = Field(..., description="Owning account ID")
    email: str
    created_at: datetime
    updated_at: datetime


class UserWithAccountResponse(UserResponse):
    """User with its account embedded."""

    account: AccountResponse

"""Pydantic schemas for Person operations."""

from datetime import date, datetime

from pydantic import Field, field_validator

from rollcall.domain.services.input_sanitizer import validate_person_name
from rollcall.infrastructure.api.schemas.base import CamelModel


class PersonCreateRequest(CamelModel):
    """Request body for adding a person to a group."""

    first_name: str = Field(..., description="Given name")
    last_name: str = Field(..., description="Family name")
    date_of_birth: date | None = Field(None, description="Date of birth (YYYY-MM-DD)")

    @field_validator("first_name", "last_name")
    @classmethod
    def sanitize_names(cls, v: str) -> str:
        return validate_person_name(v)


class PersonResponse(CamelModel):
    """Schema for person response."""

    id: int = Field(..., description="Person ID")
    group_id: int = Field(..., description="Group ID")
    first_name: str
    last_name: str
    date_of_birth: date | None = None
    created_at: datetime
    updated_at: datetime

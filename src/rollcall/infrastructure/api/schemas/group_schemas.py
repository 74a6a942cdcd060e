"""Pydantic schemas for Group operations."""

from datetime import datetime

from pydantic import Field, field_validator

from rollcall.domain.services.input_sanitizer import validate_group_name
from rollcall.infrastructure.api.schemas.base import CamelModel


class GroupInput(CamelModel):
    """Request body for creating or renaming a group."""

    name: str = Field(..., description="Group name")

    @field_validator("name")
    @classmethod
    def sanitize_name(cls, v: str) -> str:
        return validate_group_name(v)


class GroupResponse(CamelModel):
    """Schema for group response."""

    id: int = Field(..., description="Group ID")
    owner_id: int = Field(..., description="Owning account ID")
    name: str
    created_at: datetime
    updated_at: datetime

"""Request and response schemas for the HTTP API."""

from rollcall.infrastructure.api.schemas.error_schemas import (
    ErrorResponse,
    NotFoundResponse,
    ValidationErrorResponse,
)
from rollcall.infrastructure.api.schemas.group_schemas import GroupInput, GroupResponse
from rollcall.infrastructure.api.schemas.person_schemas import (
    PersonCreateRequest,
    PersonResponse,
)
from rollcall.infrastructure.api.schemas.users_schemas import (
    AccountResponse,
    UserCreateRequest,
    UserResponse,
    UserUpdateRequest,
    UserWithAccountResponse,
)

__all__ = [
    "AccountResponse",
    "ErrorResponse",
    "GroupInput",
    "GroupResponse",
    "NotFoundResponse",
    "PersonCreateRequest",
    "PersonResponse",
    "UserCreateRequest",
    "UserResponse",
    "UserUpdateRequest",
    "UserWithAccountResponse",
    "ValidationErrorResponse",
]

"""Domain errors and their HTTP contract.

Each error carries a stable ``tag`` and the HTTP status it maps to. The
API layer renders them as ``{"_tag": <tag>, ...public fields}``; nothing
else about the failure (which check failed, stored hashes, stack traces)
leaves the process.
"""

from typing import Any


class ApplicationError(Exception):
    """Base class for errors surfaced to API clients."""

    tag: str = "ApplicationError"
    status_code: int = 500

    def public_fields(self) -> dict[str, Any]:
        """Fields safe to include in the response body besides the tag."""
        return {}

    def to_body(self) -> dict[str, Any]:
        return {"_tag": self.tag, **self.public_fields()}


class Unauthorized(ApplicationError):
    """Missing or invalid credential, or the principal does not own the resource.

    Deliberately opaque: the same error covers every failed check.
    """

    tag = "Unauthorized"
    status_code = 403

    def __init__(self) -> None:
        super().__init__("Unauthorized")


class ResourceNotFound(ApplicationError):
    """The referenced resource does not exist at all."""

    status_code = 404
    resource = "Resource"

    def __init__(self, resource_id: int) -> None:
        self.id = resource_id
        super().__init__(f"{self.resource} {resource_id} not found")

    def public_fields(self) -> dict[str, Any]:
        return {"id": self.id}


class UserNotFound(ResourceNotFound):
    tag = "UserNotFound"
    resource = "User"


class GroupNotFound(ResourceNotFound):
    tag = "GroupNotFound"
    resource = "Group"


class PersonNotFound(ResourceNotFound):
    tag = "PersonNotFound"
    resource = "Person"


class EmailAlreadyTaken(ApplicationError):
    """Another user already signed up with this (normalized) email."""

    tag = "EmailAlreadyTaken"
    status_code = 400

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(f"Email {email} is already taken")

    def public_fields(self) -> dict[str, Any]:
        return {"email": self.email}


class RateLimitExceeded(ApplicationError):
    """Too many requests from one client in the current window."""

    tag = "RateLimitExceeded"
    status_code = 429

    def __init__(self, retry_after: int) -> None:
        self.retry_after = retry_after
        super().__init__(f"Rate limit exceeded, retry after {retry_after}s")

    def public_fields(self) -> dict[str, Any]:
        return {"retryAfter": self.retry_after}

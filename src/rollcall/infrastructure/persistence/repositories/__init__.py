"""Persistence repositories for database operations."""

from rollcall.infrastructure.persistence.repositories.account_repository import (
    AccountRepository,
)
from rollcall.infrastructure.persistence.repositories.audit_log_repository import (
    AuditLogRepository,
)
from rollcall.infrastructure.persistence.repositories.group_repository import (
    GroupRepository,
)
from rollcall.infrastructure.persistence.repositories.person_repository import (
    PersonRepository,
)
from rollcall.infrastructure.persistence.repositories.user_repository import (
    UserRepository,
)

__all__ = [
    "AccountRepository",
    "AuditLogRepository",
    "GroupRepository",
    "PersonRepository",
    "UserRepository",
]

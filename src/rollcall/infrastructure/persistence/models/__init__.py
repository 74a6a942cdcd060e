"""SQLAlchemy models for Rollcall tables.

All models inherit from the Base class defined in database.py and are
created on application startup.
"""

from rollcall.infrastructure.persistence.models.account import AccountModel
from rollcall.infrastructure.persistence.models.audit_log import AuditLogModel
from rollcall.infrastructure.persistence.models.group import GroupModel
from rollcall.infrastructure.persistence.models.person import PersonModel
from rollcall.infrastructure.persistence.models.user import UserModel

__all__ = [
    "AccountModel",
    "AuditLogModel",
    "GroupModel",
    "PersonModel",
    "UserModel",
]

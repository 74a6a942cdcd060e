"""Domain services for Rollcall.

Services hold the business rules: ownership checks, signup and the audit
trail. They receive a database session and build their repositories from it.
"""

from rollcall.domain.services.account_service import AccountService
from rollcall.domain.services.audit_log_service import AuditLogService
from rollcall.domain.services.group_service import GroupService
from rollcall.domain.services.person_service import PersonService
from rollcall.domain.services.policy import authorize_ownership, require_user
from rollcall.domain.services.session_resolver import SessionResolver, UserLookup

__all__ = [
    "AccountService",
    "AuditLogService",
    "GroupService",
    "PersonService",
    "SessionResolver",
    "UserLookup",
    "authorize_ownership",
    "require_user",
]

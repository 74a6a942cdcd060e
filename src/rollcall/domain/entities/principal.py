"""Principals: the identity a request acts as.

A request acts either as the trusted system (internal signup path, before
any session exists) or as a user resolved from a session credential.
"""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class SystemPrincipal:
    """Trusted internal caller.

    Only the signup flow uses it; no externally reachable request is ever
    resolved to the system principal.
    """

    def __repr__(self) -> str:
        return "SystemPrincipal()"


@dataclass(frozen=True)
class UserPrincipal:
    """A user acting through a session credential.

    Attributes:
        user_id: ID of the authenticated user.
        account_id: ID of the account owning the user. Fixed for the request.
    """

    user_id: int
    account_id: int


Principal = Union[SystemPrincipal, UserPrincipal]

SYSTEM = SystemPrincipal()

"""Ownership policy.

Every protected resource resolves to an owning account. A principal may
act on the resource only if it belongs to that account.
"""

from rollcall.domain.entities.principal import Principal, SystemPrincipal, UserPrincipal
from rollcall.domain.exceptions import Unauthorized


def authorize_ownership(principal: Principal, owner_account_id: int) -> None:
    """Allow the system principal or a user of the owning account.

    Args:
        principal: The identity acting on the request.
        owner_account_id: Account that owns the resource.

    Raises:
        Unauthorized: If the principal does not own the resource.
    """
    if isinstance(principal, SystemPrincipal):
        return
    if isinstance(principal, UserPrincipal) and principal.account_id == owner_account_id:
        return
    raise Unauthorized()


def require_user(principal: Principal) -> UserPrincipal:
    """Narrow a principal to a user principal.

    Operations that create account-owned resources need a concrete account.

    Raises:
        Unauthorized: If the principal is not a user.
    """
    if not isinstance(principal, UserPrincipal):
        raise Unauthorized()
    return principal

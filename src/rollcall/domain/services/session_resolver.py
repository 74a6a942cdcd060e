"""Resolves session credentials to principals."""

from typing import Any, Protocol

from rollcall.core.logging import get_logger
from rollcall.domain.entities.principal import UserPrincipal
from rollcall.domain.exceptions import Unauthorized
from rollcall.infrastructure.auth.access_token import AccessToken

logger = get_logger(__name__)


class UserLookup(Protocol):
    """Read access to users by credential digest."""

    async def find_by_access_token_hash(self, token_hash: str) -> Any | None: ...


class SessionResolver:
    """Turns the credential presented with a request into a principal.

    Missing, unknown and mismatched credentials all end in the same
    ``Unauthorized`` error so callers cannot tell them apart.
    """

    def __init__(self, users: UserLookup) -> None:
        """Initialize the resolver.

        Args:
            users: Lookup of users by credential digest.
        """
        self.users = users

    async def resolve_principal(self, credential: AccessToken | None) -> UserPrincipal:
        """Resolve a credential to the user principal it belongs to.

        Args:
            credential: Credential from the request, None when absent.

        Returns:
            The principal of the user holding the credential.

        Raises:
            Unauthorized: If the credential is absent, unknown or does not
                match the stored digest.
        """
        if credential is None:
            raise Unauthorized()

        user = await self.users.find_by_access_token_hash(credential.digest())
        if user is None or not credential.matches(user.access_token_hash):
            logger.debug("Session credential rejected")
            raise Unauthorized()

        return UserPrincipal(user_id=user.id, account_id=user.account_id)

"""FastAPI dependencies for database sessions and authentication.

The session credential travels in a cookie. Resolving it yields the
principal that every protected route acts as.
"""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from rollcall.core.config import get_settings
from rollcall.core.context import attach_principal
from rollcall.core.logging import bind_principal
from rollcall.domain.entities.principal import UserPrincipal
from rollcall.domain.services.session_resolver import SessionResolver
from rollcall.infrastructure.auth.access_token import AccessToken
from rollcall.infrastructure.persistence.database import get_db_session
from rollcall.infrastructure.persistence.repositories import UserRepository

DbSession = Annotated[AsyncSession, Depends(get_db_session)]


async def get_current_principal(request: Request, session: DbSession) -> UserPrincipal:
    """Resolve the session cookie to the acting user.

    Args:
        request: The incoming request.
        session: Database session for the credential lookup.

    Returns:
        UserPrincipal: The authenticated user's identity.

    Raises:
        Unauthorized: If the cookie is missing or does not match any user.
    """
    cookie = request.cookies.get(get_settings().session_cookie_name)
    credential = AccessToken.from_cookie(cookie)

    resolver = SessionResolver(UserRepository(session))
    principal = await resolver.resolve_principal(credential)

    attach_principal(principal)
    bind_principal(principal.user_id, principal.account_id)
    return principal


CurrentPrincipal = Annotated[UserPrincipal, Depends(get_current_principal)]

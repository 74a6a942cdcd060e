"""Router for signup and user management.

Signup is the only unauthenticated write. It issues the session credential
and hands it to the client in an HttpOnly cookie.
"""

from fastapi import APIRouter, Response

from rollcall.core.config import get_settings
from rollcall.core.logging import get_logger
from rollcall.domain.services import AccountService
from rollcall.infrastructure.api.dependencies import CurrentPrincipal, DbSession
from rollcall.infrastructure.api.schemas import (
    ErrorResponse,
    NotFoundResponse,
    UserCreateRequest,
    UserResponse,
    UserUpdateRequest,
    UserWithAccountResponse,
    ValidationErrorResponse,
)
from rollcall.infrastructure.auth.access_token import AccessToken
from rollcall.infrastructure.persistence.models import UserModel

router = APIRouter(tags=["Users"])
logger = get_logger(__name__)


def set_session_cookie(response: Response, token: AccessToken) -> None:
    """Attach the session credential cookie to a response."""
    settings = get_settings()
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token.reveal(),
        max_age=settings.session_cookie_max_age,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )


@router.post(
    "",
    response_model=UserWithAccountResponse,
    summary="Sign up",
    responses={400: {"model": ValidationErrorResponse}},
)
async def create_user(
    body: UserCreateRequest,
    response: Response,
    session: DbSession,
) -> UserModel:
    """Create an account and a user, and start a session.

    Returns 400 ``EmailAlreadyTaken`` if the email is already registered.
    """
    service = AccountService(session)
    user, token = await service.create_user(body.email)
    await session.commit()
    logger.info("User signed up", user_id=user.id, account_id=user.account_id)

    set_session_cookie(response, token)
    return user


@router.get(
    "/me",
    response_model=UserWithAccountResponse,
    summary="Current user",
    responses={403: {"model": ErrorResponse}},
)
async def get_me(principal: CurrentPrincipal, session: DbSession) -> UserModel:
    """Return the user the session cookie belongs to."""
    return await AccountService(session).get_current_user(principal)


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    summary="Get a user",
    responses={403: {"model": ErrorResponse}, 404: {"model": NotFoundResponse}},
)
async def get_user(user_id: int, principal: CurrentPrincipal, session: DbSession) -> UserModel:
    """Get a user of the caller's account."""
    return await AccountService(session).get_user(principal, user_id)


@router.patch(
    "/{user_id}",
    response_model=UserResponse,
    summary="Update a user",
    responses={
        400: {"model": ValidationErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": NotFoundResponse},
    },
)
async def update_user(
    user_id: int,
    body: UserUpdateRequest,
    principal: CurrentPrincipal,
    session: DbSession,
) -> UserModel:
    """Change the email of a user of the caller's account."""
    user = await AccountService(session).update_user(principal, user_id, body.email)
    await session.commit()
    return user

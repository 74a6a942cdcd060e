"""Router for group management and the people inside groups."""

from fastapi import APIRouter

from rollcall.core.logging import get_logger
from rollcall.domain.services import GroupService, PersonService
from rollcall.infrastructure.api.dependencies import CurrentPrincipal, DbSession
from rollcall.infrastructure.api.schemas import (
    ErrorResponse,
    GroupInput,
    GroupResponse,
    NotFoundResponse,
    PersonCreateRequest,
    PersonResponse,
    ValidationErrorResponse,
)
from rollcall.infrastructure.persistence.models import GroupModel, PersonModel

router = APIRouter(tags=["Groups"])
logger = get_logger(__name__)

OWNED_GROUP_ERRORS = {403: {"model": ErrorResponse}, 404: {"model": NotFoundResponse}}


@router.post(
    "",
    response_model=GroupResponse,
    summary="Create a group",
    responses={400: {"model": ValidationErrorResponse}, 403: {"model": ErrorResponse}},
)
async def create_group(
    body: GroupInput,
    principal: CurrentPrincipal,
    session: DbSession,
) -> GroupModel:
    """Create a group owned by the caller's account."""
    group = await GroupService(session).create_group(principal, body.name)
    await session.commit()
    logger.info("Group created", group_id=group.id, owner_id=group.owner_id)
    return group


@router.get(
    "",
    response_model=list[GroupResponse],
    summary="List groups",
    responses={403: {"model": ErrorResponse}},
)
async def list_groups(principal: CurrentPrincipal, session: DbSession) -> list[GroupModel]:
    return await GroupService(session).list_groups(principal)


@router.get(
    "/{group_id}",
    response_model=GroupResponse,
    summary="Get a group",
    responses=OWNED_GROUP_ERRORS,
)
async def get_group(group_id: int, principal: CurrentPrincipal, session: DbSession) -> GroupModel:
    return await GroupService(session).get_group(principal, group_id)


@router.patch(
    "/{group_id}",
    response_model=GroupResponse,
    summary="Rename a group",
    responses={400: {"model": ValidationErrorResponse}, **OWNED_GROUP_ERRORS},
)
async def update_group(
    group_id: int,
    body: GroupInput,
    principal: CurrentPrincipal,
    session: DbSession,
) -> GroupModel:
    """Rename a group. Only the owning account may do this."""
    group = await GroupService(session).rename_group(principal, group_id, body.name)
    await session.commit()
    return group


@router.post(
    "/{group_id}/people",
    response_model=PersonResponse,
    summary="Add a person to a group",
    responses={400: {"model": ValidationErrorResponse}, **OWNED_GROUP_ERRORS},
)
async def create_person(
    group_id: int,
    body: PersonCreateRequest,
    principal: CurrentPrincipal,
    session: DbSession,
) -> PersonModel:
    """Add a person to a group the caller owns."""
    person = await PersonService(session).create_person(
        principal,
        group_id,
        first_name=body.first_name,
        last_name=body.last_name,
        date_of_birth=body.date_of_birth,
    )
    await session.commit()
    return person


@router.get(
    "/{group_id}/people",
    response_model=list[PersonResponse],
    summary="List people in a group",
    responses=OWNED_GROUP_ERRORS,
)
async def list_people(
    group_id: int, principal: CurrentPrincipal, session: DbSession
) -> list[PersonModel]:
    return await PersonService(session).list_people(principal, group_id)

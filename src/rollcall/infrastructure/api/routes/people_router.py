"""Router for reading people directly by ID."""

from fastapi import APIRouter

from rollcall.domain.services import PersonService
from rollcall.infrastructure.api.dependencies import CurrentPrincipal, DbSession
from rollcall.infrastructure.api.schemas import ErrorResponse, NotFoundResponse, PersonResponse
from rollcall.infrastructure.persistence.models import PersonModel

router = APIRouter(tags=["People"])


@router.get(
    "/{person_id}",
    response_model=PersonResponse,
    summary="Get a person",
    responses={403: {"model": ErrorResponse}, 404: {"model": NotFoundResponse}},
)
async def get_person(
    person_id: int, principal: CurrentPrincipal, session: DbSession
) -> PersonModel:
    """Get a person, authorized through the owner of its group.

    The read is recorded in the audit log.
    """
    person = await PersonService(session).get_person(principal, person_id)
    await session.commit()
    return person

"""Person service: people inside account-owned groups.

Access to a person is governed by the owner of the group it belongs to.
The group is always loaded and authorized before the person is touched.
"""

from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from rollcall.core.logging import get_logger
from rollcall.domain.entities.principal import Principal
from rollcall.domain.exceptions import PersonNotFound
from rollcall.domain.services.audit_log_service import AuditLogService
from rollcall.domain.services.group_service import GroupService
from rollcall.infrastructure.persistence.models import PersonModel
from rollcall.infrastructure.persistence.repositories import PersonRepository

logger = get_logger(__name__)


class PersonService:
    """Service for person business logic."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the person service.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session
        self.person_repo = PersonRepository(session)
        self.groups = GroupService(session)
        self.audit = AuditLogService(session)

    async def create_person(
        self,
        principal: Principal,
        group_id: int,
        first_name: str,
        last_name: str,
        date_of_birth: Optional[date] = None,
    ) -> PersonModel:
        """Add a person to a group the principal owns.

        Raises:
            GroupNotFound: If the group does not exist.
            Unauthorized: If another account owns the group.
        """
        group = await self.groups.get_group(principal, group_id)
        now = datetime.now(timezone.utc)
        person = await self.person_repo.create(
            PersonModel(
                group_id=group.id,
                first_name=first_name,
                last_name=last_name,
                date_of_birth=date_of_birth,
                created_at=now,
                updated_at=now,
            )
        )
        await self.audit.record(
            "CREATE", "people", person.id, principal,
            new_values=AuditLogService.snapshot(person),
        )
        logger.info("Person created", person_id=person.id, group_id=group.id)
        return person

    async def get_person(self, principal: Principal, person_id: int) -> PersonModel:
        """Read a person through its group's ownership.

        Raises:
            PersonNotFound: If the person does not exist.
            GroupNotFound: If the person's group does not exist.
            Unauthorized: If another account owns the group.
        """
        person = await self.person_repo.get_by_id(person_id)
        if person is None:
            raise PersonNotFound(person_id)
        await self.groups.get_group(principal, person.group_id)
        await self.audit.record("READ", "people", person.id, principal)
        return person

    async def list_people(self, principal: Principal, group_id: int) -> list[PersonModel]:
        """List the people in a group the principal owns."""
        group = await self.groups.get_group(principal, group_id)
        return await self.person_repo.list_by_group(group.id)

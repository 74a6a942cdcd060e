"""Repository for person database operations."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rollcall.infrastructure.persistence.models import PersonModel


class PersonRepository:
    """Repository for person database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, person: PersonModel) -> PersonModel:
        self.session.add(person)
        await self.session.flush()
        return person

    async def get_by_id(self, person_id: int) -> PersonModel | None:
        result = await self.session.execute(
            select(PersonModel).where(PersonModel.id == person_id)
        )
        return result.scalar_one_or_none()

    async def list_by_group(
        self, group_id: int, skip: int = 0, limit: int | None = None
    ) -> list[PersonModel]:
        """List people in a group, oldest first.

        Args:
            group_id: Group ID.
            skip: Number of records to skip.
            limit: Maximum number of records to return, or None for all.

        Returns:
            List of person models.
        """
        result = await self.session.execute(
            select(PersonModel)
            .where(PersonModel.group_id == group_id)
            .order_by(PersonModel.id)
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

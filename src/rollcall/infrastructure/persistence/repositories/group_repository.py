"""Repository for group database operations."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rollcall.infrastructure.persistence.models import GroupModel


class GroupRepository:
    """Repository for group database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, group: GroupModel) -> GroupModel:
        """Create a new group.

        Args:
            group: Group model to create.

        Returns:
            Created group model.
        """
        self.session.add(group)
        await self.session.flush()
        return group

    async def get_by_id(self, group_id: int) -> GroupModel | None:
        """Get a group by ID.

        Args:
            group_id: Group ID.

        Returns:
            Group model if found, None otherwise.
        """
        result = await self.session.execute(
            select(GroupModel).where(GroupModel.id == group_id)
        )
        return result.scalar_one_or_none()

    async def list_by_owner(
        self, owner_id: int, skip: int = 0, limit: int | None = None
    ) -> list[GroupModel]:
        """List groups owned by an account, oldest first.

        Args:
            owner_id: Owning account ID.
            skip: Number of records to skip.
            limit: Maximum number of records to return, or None for all.

        Returns:
            List of group models.
        """
        result = await self.session.execute(
            select(GroupModel)
            .where(GroupModel.owner_id == owner_id)
            .order_by(GroupModel.id)
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def update(self, group: GroupModel) -> GroupModel:
        """Flush pending changes on a group."""
        await self.session.flush()
        return group

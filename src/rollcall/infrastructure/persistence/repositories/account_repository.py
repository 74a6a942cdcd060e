"""Account repository for database operations."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rollcall.infrastructure.persistence.models import AccountModel


class AccountRepository:
    """Repository for account database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, account: AccountModel) -> AccountModel:
        """Create a new account and flush to obtain its ID."""
        self.session.add(account)
        await self.session.flush()
        return account

    async def get_by_id(self, account_id: int) -> AccountModel | None:
        result = await self.session.execute(
            select(AccountModel).where(AccountModel.id == account_id)
        )
        return result.scalar_one_or_none()

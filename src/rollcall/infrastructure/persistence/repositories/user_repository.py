"""User repository for database operations."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rollcall.infrastructure.persistence.models import UserModel


class UserRepository:
    """Repository for user database operations.

    Also serves as the credential lookup for the session resolver through
    ``find_by_access_token_hash``.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, user: UserModel) -> UserModel:
        """Create a new user.

        Args:
            user: User model to create.

        Returns:
            Created user model.
        """
        self.session.add(user)
        await self.session.flush()
        return user

    async def get_by_id(self, user_id: int) -> UserModel | None:
        """Get a user by ID.

        Args:
            user_id: User ID.

        Returns:
            User model with its account loaded if found, None otherwise.
        """
        result = await self.session.execute(
            select(UserModel).where(UserModel.id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> UserModel | None:
        """Get a user by normalized email.

        Args:
            email: Email address, already trimmed and lowercased.

        Returns:
            User model if found, None otherwise.
        """
        result = await self.session.execute(
            select(UserModel).where(UserModel.email == email)
        )
        return result.scalar_one_or_none()

    async def find_by_access_token_hash(self, token_hash: str) -> UserModel | None:
        """Look up the user owning a credential digest.

        Args:
            token_hash: SHA-256 hex digest of the credential.

        Returns:
            User model if a user holds this credential, None otherwise.
        """
        result = await self.session.execute(
            select(UserModel).where(UserModel.access_token_hash == token_hash)
        )
        return result.scalar_one_or_none()

    async def update(self, user: UserModel) -> UserModel:
        """Flush pending changes on a user."""
        await self.session.flush()
        return user

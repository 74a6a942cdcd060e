"""Account service: signup and user management.

Signup runs as the system principal because no session exists yet. It
creates a fresh account, the user in it and the user's credential.
"""

from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from rollcall.core.logging import get_logger
from rollcall.domain.entities.principal import SYSTEM, Principal, UserPrincipal
from rollcall.domain.exceptions import EmailAlreadyTaken, Unauthorized, UserNotFound
from rollcall.domain.services.audit_log_service import AuditLogService
from rollcall.domain.services.input_sanitizer import normalize_email
from rollcall.domain.services.policy import authorize_ownership
from rollcall.infrastructure.auth.access_token import AccessToken
from rollcall.infrastructure.persistence.models import AccountModel, UserModel
from rollcall.infrastructure.persistence.repositories import (
    AccountRepository,
    UserRepository,
)

logger = get_logger(__name__)


class AccountService:
    """Service for account and user business logic."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the account service.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session
        self.account_repo = AccountRepository(session)
        self.user_repo = UserRepository(session)
        self.audit = AuditLogService(session)

    async def create_user(
        self, email: str, principal: Principal = SYSTEM
    ) -> tuple[UserModel, AccessToken]:
        """Sign up a new user in a new account.

        Args:
            email: Email address (normalized here as well).
            principal: Acting principal, the system principal for signup.

        Returns:
            Tuple of (created user with its account, issued credential).

        Raises:
            EmailAlreadyTaken: If a user with the normalized email exists.
        """
        email = normalize_email(email)
        if await self.user_repo.get_by_email(email) is not None:
            raise EmailAlreadyTaken(email)

        now = datetime.now(timezone.utc)
        account = await self.account_repo.create(
            AccountModel(created_at=now, updated_at=now)
        )

        token = AccessToken.generate()
        user = UserModel(
            account_id=account.id,
            email=email,
            access_token_hash=token.digest(),
            created_at=now,
            updated_at=now,
        )
        user.account = account
        try:
            await self.user_repo.create(user)
        except IntegrityError:
            raise EmailAlreadyTaken(email) from None

        await self.audit.record(
            "CREATE", "accounts", account.id, principal,
            new_values=AuditLogService.snapshot(account),
        )
        await self.audit.record(
            "CREATE", "users", user.id, principal,
            new_values=AuditLogService.snapshot(user),
        )

        logger.info("User signed up", user_id=user.id, account_id=account.id)
        return user, token

    async def get_current_user(self, principal: UserPrincipal) -> UserModel:
        """Load the user behind a resolved principal.

        Raises:
            Unauthorized: If the user no longer exists.
        """
        user = await self.user_repo.get_by_id(principal.user_id)
        if user is None:
            raise Unauthorized()
        return user

    async def get_user(self, principal: Principal, user_id: int) -> UserModel:
        """Load a user the principal's account owns.

        Raises:
            UserNotFound: If the user does not exist.
            Unauthorized: If the user belongs to another account.
        """
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise UserNotFound(user_id)
        authorize_ownership(principal, user.account_id)
        return user

    async def update_user(self, principal: Principal, user_id: int, email: str) -> UserModel:
        """Change a user's email.

        Raises:
            UserNotFound: If the user does not exist.
            Unauthorized: If the user belongs to another account.
            EmailAlreadyTaken: If another user already has the email.
        """
        user = await self.get_user(principal, user_id)
        email = normalize_email(email)
        if email == user.email:
            return user

        existing = await self.user_repo.get_by_email(email)
        if existing is not None and existing.id != user.id:
            raise EmailAlreadyTaken(email)

        old_values = AuditLogService.snapshot(user)
        user.email = email
        user.updated_at = datetime.now(timezone.utc)
        try:
            await self.user_repo.update(user)
        except IntegrityError:
            raise EmailAlreadyTaken(email) from None

        await self.audit.record(
            "UPDATE", "users", user.id, principal,
            old_values=old_values,
            new_values=AuditLogService.snapshot(user),
        )
        logger.info("User updated", user_id=user.id)
        return user

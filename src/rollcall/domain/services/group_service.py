"""Group service: account-owned groups."""

from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from rollcall.core.logging import get_logger
from rollcall.domain.entities.principal import Principal
from rollcall.domain.exceptions import GroupNotFound
from rollcall.domain.services.audit_log_service import AuditLogService
from rollcall.domain.services.policy import authorize_ownership, require_user
from rollcall.infrastructure.persistence.models import GroupModel
from rollcall.infrastructure.persistence.repositories import GroupRepository

logger = get_logger(__name__)


class GroupService:
    """Service for group business logic.

    Every read or write loads the group first and then checks ownership,
    so a missing group is reported as ``GroupNotFound`` and a foreign one
    as ``Unauthorized``.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.group_repo = GroupRepository(session)
        self.audit = AuditLogService(session)

    async def create_group(self, principal: Principal, name: str) -> GroupModel:
        """Create a group owned by the principal's account."""
        user = require_user(principal)
        now = datetime.now(timezone.utc)
        group = await self.group_repo.create(
            GroupModel(owner_id=user.account_id, name=name, created_at=now, updated_at=now)
        )
        await self.audit.record(
            "CREATE", "groups", group.id, principal,
            new_values=AuditLogService.snapshot(group),
        )
        logger.info("Group created", group_id=group.id, owner_id=group.owner_id)
        return group

    async def get_group(self, principal: Principal, group_id: int) -> GroupModel:
        """Load a group and check the principal owns it.

        Raises:
            GroupNotFound: If the group does not exist.
            Unauthorized: If another account owns it.
        """
        group = await self.group_repo.get_by_id(group_id)
        if group is None:
            raise GroupNotFound(group_id)
        authorize_ownership(principal, group.owner_id)
        return group

    async def list_groups(self, principal: Principal) -> list[GroupModel]:
        """List the groups owned by the principal's account."""
        user = require_user(principal)
        return await self.group_repo.list_by_owner(user.account_id)

    async def rename_group(self, principal: Principal, group_id: int, name: str) -> GroupModel:
        """Rename a group the principal owns."""
        group = await self.get_group(principal, group_id)
        old_values = AuditLogService.snapshot(group)
        group.name = name
        group.updated_at = datetime.now(timezone.utc)
        await self.group_repo.update(group)
        await self.audit.record(
            "UPDATE", "groups", group.id, principal,
            old_values=old_values,
            new_values=AuditLogService.snapshot(group),
        )
        logger.info("Group renamed", group_id=group.id)
        return group

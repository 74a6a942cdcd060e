"""Audit log repository for write-only audit trail operations."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rollcall.infrastructure.persistence.models import AuditLogModel


class AuditLogRepository:
    """Repository for audit log database operations.

    Entries are only ever created. There are no update or delete methods.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, audit_log: AuditLogModel) -> AuditLogModel:
        """Insert an audit log entry.

        Args:
            audit_log: Audit log model to insert.

        Returns:
            The inserted model with its ID set.
        """
        self.session.add(audit_log)
        await self.session.flush()
        return audit_log

    async def list_for_entity(self, entity: str, entity_id: int) -> list[AuditLogModel]:
        """Return the audit trail of one row, in insertion order.

        Args:
            entity: Table name.
            entity_id: Row ID.

        Returns:
            List of audit log models.
        """
        result = await self.session.execute(
            select(AuditLogModel)
            .where(
                (AuditLogModel.entity == entity) & (AuditLogModel.entity_id == entity_id)
            )
            .order_by(AuditLogModel.id)
        )
        return list(result.scalars().all())

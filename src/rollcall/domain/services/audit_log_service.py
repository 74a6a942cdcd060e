"""Audit log service for recording who did what to which row.

Entries are written in the caller's session inside a savepoint, so they
commit together with the change they describe. A failed audit write is
logged and never fails the operation being audited.
"""

import json
from datetime import date, datetime, timezone
from typing import Any, Literal, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.inspection import inspect

from rollcall.core.context import get_current_context
from rollcall.core.logging import get_logger
from rollcall.domain.entities.principal import Principal, UserPrincipal
from rollcall.infrastructure.persistence.models.audit_log import AuditLogModel
from rollcall.infrastructure.persistence.repositories.audit_log_repository import (
    AuditLogRepository,
)

logger = get_logger(__name__)

AuditAction = Literal["CREATE", "UPDATE", "DELETE", "READ"]


def _json_value(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


class AuditLogService:
    """Service for capturing audit log entries."""

    # Columns that never leave the table they live in
    SENSITIVE_FIELDS = {"access_token_hash"}

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the audit log service.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session
        self.repository = AuditLogRepository(session)

    @classmethod
    def snapshot(cls, model: Any) -> dict[str, Any]:
        """Column values of a model instance, without sensitive columns."""
        mapper = inspect(model).mapper
        return {
            column.key: _json_value(getattr(model, column.key))
            for column in mapper.column_attrs
            if column.key not in cls.SENSITIVE_FIELDS
        }

    async def record(
        self,
        action: AuditAction,
        entity: str,
        entity_id: int,
        principal: Principal,
        old_values: Optional[dict[str, Any]] = None,
        new_values: Optional[dict[str, Any]] = None,
    ) -> Optional[AuditLogModel]:
        """Record one audited operation.

        Request metadata (IP, user agent, correlation ID) is taken from the
        current request context when there is one.

        Args:
            action: CREATE, UPDATE, DELETE or READ.
            entity: Table name of the affected row.
            entity_id: ID of the affected row.
            principal: Identity that performed the operation.
            old_values: Snapshot before the change.
            new_values: Snapshot after the change.

        Returns:
            The inserted entry, or None if writing it failed.
        """
        context = get_current_context()
        user_id = principal.user_id if isinstance(principal, UserPrincipal) else None
        account_id = principal.account_id if isinstance(principal, UserPrincipal) else None

        entry = AuditLogModel(
            user_id=user_id,
            account_id=account_id,
            action=action,
            entity=entity,
            entity_id=entity_id,
            old_values=self._encode(old_values),
            new_values=self._encode(new_values),
            ip_address=context.client_ip if context else None,
            user_agent=context.user_agent if context else None,
            request_id=context.correlation_id if context else None,
            occurred_at=datetime.now(timezone.utc),
        )

        try:
            async with self.session.begin_nested():
                await self.repository.create(entry)
        except Exception as e:
            logger.warning(
                "Failed to write audit log entry",
                action=action,
                entity=entity,
                entity_id=entity_id,
                error=str(e),
            )
            return None

        logger.debug(
            "Audit log entry recorded",
            action=action,
            entity=entity,
            entity_id=entity_id,
            user_id=user_id,
        )
        return entry

    def _encode(self, values: Optional[dict[str, Any]]) -> Optional[str]:
        if values is None:
            return None
        cleaned = {
            key: _json_value(value)
            for key, value in values.items()
            if key not in self.SENSITIVE_FIELDS
        }
        return json.dumps(cleaned, sort_keys=True)

"""SQLAlchemy model for the audit_logs table.

One row per audited operation. Rows are only ever inserted.
"""

from datetime import datetime

from sqlalchemy import CheckConstraint, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from rollcall.infrastructure.persistence.database import Base
from rollcall.infrastructure.persistence.models.mixins import UTCDateTime, utcnow


class AuditLogModel(Base):
    """SQLAlchemy model for the audit_logs table.

    Attributes:
        id: Primary key (auto-incrementing, serves as sequence number).
        user_id: Acting user, NULL for the system principal.
        account_id: Acting user's account, NULL for the system principal.
        action: CREATE, UPDATE, DELETE or READ.
        entity: Table name of the affected entity.
        entity_id: ID of the affected row.
        old_values: JSON snapshot before the change (NULL for CREATE/READ).
        new_values: JSON snapshot after the change (NULL for DELETE/READ).
        ip_address: Client IP address.
        user_agent: Client user agent.
        request_id: Correlation ID of the request.
        occurred_at: When the operation happened (UTC).
    """

    __tablename__ = "audit_logs"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Unique identifier",
    )
    user_id: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        index=True,
        comment="Acting user (NULL for system)",
    )
    account_id: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        comment="Acting account (NULL for system)",
    )
    action: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        comment="Action: CREATE, UPDATE, DELETE, READ",
    )
    entity: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Affected table",
    )
    entity_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Affected row",
    )
    old_values: Mapped[str | None] = mapped_column(Text, nullable=True)
    new_values: Mapped[str | None] = mapped_column(Text, nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(String(500), nullable=True)
    request_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    occurred_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=utcnow,
        index=True,
    )

    __table_args__ = (
        CheckConstraint(
            "action IN ('CREATE', 'UPDATE', 'DELETE', 'READ')",
            name="ck_audit_logs_action",
        ),
        Index("ix_audit_logs_entity", "entity", "entity_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<AuditLog(id={self.id}, action={self.action}, "
            f"entity={self.entity}, entity_id={self.entity_id})>"
        )

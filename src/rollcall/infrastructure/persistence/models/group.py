"""SQLAlchemy model for the groups table."""

from datetime import datetime

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from rollcall.infrastructure.persistence.database import Base
from rollcall.infrastructure.persistence.models.mixins import UTCDateTime, utcnow


class GroupModel(Base):
    """SQLAlchemy model for the groups table.

    Groups are owned by an account. Only principals of that account may
    read or rename the group or touch the people in it.

    Attributes:
        id: Primary key (auto-incrementing).
        owner_id: Foreign key to the owning account.
        name: Display name.
        created_at: Timestamp when the group was created.
        updated_at: Timestamp when the group was last updated.
    """

    __tablename__ = "groups"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Group ID",
    )
    owner_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Owning account",
    )
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Group name",
    )
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=utcnow,
    )

    def __repr__(self) -> str:
        return f"<Group(id={self.id}, owner_id={self.owner_id}, name={self.name})>"

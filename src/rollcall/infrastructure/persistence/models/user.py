"""SQLAlchemy model for the users table.

Each user belongs to one account. The session credential is stored only
as its SHA-256 digest in ``access_token_hash``.
"""

from datetime import datetime

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rollcall.infrastructure.persistence.database import Base
from rollcall.infrastructure.persistence.models.mixins import UTCDateTime, utcnow


class UserModel(Base):
    """SQLAlchemy model for the users table.

    Attributes:
        id: Primary key (auto-incrementing).
        account_id: Foreign key to accounts table.
        email: Normalized (trimmed, lowercased) email, unique.
        access_token_hash: SHA-256 hex digest of the session credential.
        created_at: Timestamp when the user was created.
        updated_at: Timestamp when the user was last updated.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="User ID",
    )
    account_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Foreign key to accounts table",
    )
    email: Mapped[str] = mapped_column(
        String(254),
        nullable=False,
        unique=True,
        comment="Normalized email address",
    )
    access_token_hash: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        comment="SHA-256 digest of the session credential",
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

    account: Mapped["AccountModel"] = relationship(  # noqa: F821
        "AccountModel",
        lazy="joined",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, account_id={self.account_id})>"

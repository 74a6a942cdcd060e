"""SQLAlchemy model for the people table."""

from datetime import date, datetime

from sqlalchemy import Date, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from rollcall.infrastructure.persistence.database import Base
from rollcall.infrastructure.persistence.models.mixins import UTCDateTime, utcnow


class PersonModel(Base):
    """SQLAlchemy model for the people table.

    People belong to a group; access is governed by the group's owner.

    Attributes:
        id: Primary key (auto-incrementing).
        group_id: Foreign key to groups table.
        first_name: Given name.
        last_name: Family name.
        date_of_birth: Optional date of birth.
        created_at: Timestamp when the person was created.
        updated_at: Timestamp when the person was last updated.
    """

    __tablename__ = "people"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Person ID",
    )
    group_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("groups.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Foreign key to groups table",
    )
    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
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
        return f"<Person(id={self.id}, group_id={self.group_id})>"

"""Instructor ORM — teaching staff shown in schedules; archived rather than deleted."""

from sqlalchemy import String, Boolean
from sqlalchemy.orm import Mapped, mapped_column

from classtrack.db.base import Base, VersionedMixin


class Instructor(VersionedMixin, Base):
    __tablename__ = "instructors"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    archived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    unavailable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    unavailable_reason: Mapped[str | None] = mapped_column(String(500), nullable=True)

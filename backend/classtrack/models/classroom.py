"""Classroom ORM — a bookable room."""

from sqlalchemy import String, Text, Integer, Boolean
from sqlalchemy.orm import Mapped, mapped_column

from classtrack.db.base import Base, VersionedMixin
from classtrack.models.json_column import JsonList


class Classroom(VersionedMixin, Base):
    __tablename__ = "classrooms"

    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    location: Mapped[str | None] = mapped_column(String(200), nullable=True)
    equipment: Mapped[list] = mapped_column(JsonList, nullable=False, default=list)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

"""UsageRecord ORM — a classroom occupancy interval and its utilization rate."""

import uuid
from datetime import datetime

from sqlalchemy import String, Text, Float, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from classtrack.db.base import Base, VersionedMixin


class UsageRecord(VersionedMixin, Base):
    __tablename__ = "usage_records"

    classroom_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("classrooms.id"), nullable=True,
    )
    time_in: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    time_out: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    utilization_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

"""AttendanceEvent ORM — one time-in of a student in a classroom, verified by an admin.

Invariants:
    - verified_by / verified_at are protected from payloads; only the verifying
      service sets them (as system fields)
"""

import uuid
from datetime import datetime

from sqlalchemy import String, Text, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from classtrack.db.base import Base, VersionedMixin


class AttendanceEvent(VersionedMixin, Base):
    __tablename__ = "attendance_events"

    student_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("users.id"), nullable=True,
    )
    classroom_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("classrooms.id"), nullable=True,
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)
    verified_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("users.id"), nullable=True,
    )
    verified_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

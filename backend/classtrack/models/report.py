"""Report ORM — a generated utilization report with an editable comment.

Invariants:
    - generated_by is protected; shared_with grows by append
"""

import uuid

from sqlalchemy import String, Text, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from classtrack.db.base import Base, VersionedMixin
from classtrack.models.json_column import JsonList


class Report(VersionedMixin, Base):
    __tablename__ = "reports"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    report_type: Mapped[str] = mapped_column(String(50), nullable=False, default="usage")
    generated_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("users.id"), nullable=True,
    )
    comment: Mapped[str] = mapped_column(Text, nullable=False, default="")
    shared_with: Mapped[list] = mapped_column(JsonList, nullable=False, default=list)

"""SQLAlchemy Declarative Base — shared base class and versioning columns for all models.

Invariants:
    - All models inherit from Base and VersionedMixin
    - version starts at 0 and is only ever written by the CAS repository (version + 1)
    - created_at set once on insert; updated_at stamped by every successful CAS

Design Decisions:
    - Separate file for Base: avoids circular imports between models
    - Generic Uuid type over the postgresql dialect type: same models run on SQLite in tests
    - No SQLAlchemy version_id_col: the ORM's implicit check would add a second write path;
      all versioned writes go through one explicit UPDATE ... WHERE version = :expected
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ClassTrack ORM models."""
    pass


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class VersionedMixin:
    """Identity, version token and timestamps shared by every managed record."""

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    version: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utc_now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utc_now,
    )
